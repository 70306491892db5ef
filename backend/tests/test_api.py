import pytest

from conftest import make_token
from errors import ErrorMessages
from services.lever_service import LeverService

SETUP = {
    "anti_vision": "Stuck.",
    "vision": "Building.",
    "year_goal": "Launch.",
    "month_project": "MVP.",
    "constraints": "Health first.",
    "daily_levers": "1. Write\n2. Lift",
}


def test_health_check(anon_client):
    resp = anon_client.get("/api/v1/health-check")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_missing_token_is_rejected(anon_client):
    resp = anon_client.get("/api/v1/dashboard")
    assert resp.status_code == 401


def test_bad_token_is_rejected(anon_client):
    headers = {"Authorization": f"Bearer {make_token('someone', secret='wrong-secret')}"}
    assert anon_client.get("/api/v1/dashboard", headers=headers).status_code == 401

    headers = {"Authorization": f"Bearer {make_token('someone', audience='anon')}"}
    assert anon_client.get("/api/v1/dashboard", headers=headers).status_code == 401


def test_supabase_token_identifies_the_user(anon_client, user_id):
    headers = {"Authorization": f"Bearer {make_token(user_id)}"}
    resp = anon_client.get("/api/v1/dashboard", headers=headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["user"]["id"] == user_id
    assert body["progress"]["level"] == 1
    assert body["progress"]["level_title"] == "Conformist"


def test_quick_setup_then_dashboard(api_client):
    resp = api_client.post("/api/v1/onboarding/quick-setup", json=SETUP)
    assert resp.status_code == 200
    assert resp.json()["data"]["levers_created"] == 2

    body = api_client.get("/api/v1/dashboard").json()
    assert body["sheet"]["vision"] == "Building."
    assert [l["lever_text"] for l in body["levers"]] == ["Write", "Lift"]
    assert body["active_boss"]["project_text"] == "MVP."
    assert body["today_log"] is None

    again = api_client.post("/api/v1/onboarding/quick-setup", json=SETUP)
    assert again.status_code == 409


def test_character_sheet_update(api_client):
    assert api_client.get("/api/v1/character-sheet").json() is None
    assert api_client.put("/api/v1/character-sheet", json={"vision": "x"}).status_code == 404

    api_client.post("/api/v1/onboarding/quick-setup", json=SETUP)
    resp = api_client.put("/api/v1/character-sheet", json={"year_goal": "Launch twice."})
    assert resp.status_code == 200
    assert resp.json()["year_goal"] == "Launch twice."
    assert resp.json()["vision"] == "Building."


def test_lever_toggle_round_trip(api_client):
    created = api_client.post("/api/v1/levers", json=[{"lever_text": "Write", "xp_value": 50, "order": 0}])
    assert created.status_code == 200
    lever_id = created.json()[0]["id"]

    first = api_client.post(f"/api/v1/levers/{lever_id}/toggle").json()
    assert first == {"xp_change": 50, "is_completed": True, "total_xp": 50, "level": 1}
    log = api_client.get("/api/v1/daily-log").json()
    assert log["levers_completed"] == [lever_id]
    assert log["xp_gained"] == 50

    second = api_client.post(f"/api/v1/levers/{lever_id}/toggle").json()
    assert second == {"xp_change": -50, "is_completed": False, "total_xp": 0, "level": 1}
    assert api_client.get("/api/v1/daily-log").json()["levers_completed"] == []


def test_toggle_unknown_lever_is_404(api_client):
    assert api_client.post("/api/v1/levers/nope/toggle").status_code == 404


def test_lever_edit_sync_and_delete(api_client):
    created = api_client.post("/api/v1/levers", json=[
        {"lever_text": "Write", "order": 0},
        {"lever_text": "Scroll less", "order": 1},
    ]).json()
    write, scroll = created[0]["id"], created[1]["id"]
    assert created[0]["xp_value"] == 50

    updated = api_client.put(f"/api/v1/levers/{write}", json={"xp_value": 80})
    assert updated.json()["xp_value"] == 80

    synced = api_client.put("/api/v1/levers", json={"levers": [
        {"id": write, "lever_text": "Write 2h", "xp_value": 80, "order": 0},
        {"lever_text": "Lift", "xp_value": 60, "order": 1},
    ]}).json()
    assert [l["lever_text"] for l in synced] == ["Write 2h", "Lift"]
    assert scroll not in [l["id"] for l in synced]

    assert api_client.delete(f"/api/v1/levers/{write}").status_code == 200
    assert [l["lever_text"] for l in api_client.get("/api/v1/levers").json()] == ["Lift"]
    assert api_client.delete("/api/v1/levers/nope").status_code == 404


def test_direction_check(api_client):
    resp = api_client.post("/api/v1/daily-log/direction", json={"direction": "vision", "comment": "Locked in"})
    assert resp.status_code == 200
    assert resp.json()["current_streak"] == 1
    assert resp.json()["xp_gained"] == 50

    assert api_client.post(
        "/api/v1/daily-log/direction", json={"direction": "vision", "comment": "  "}
    ).status_code == 400
    assert api_client.post(
        "/api/v1/daily-log/direction", json={"direction": "meh", "comment": "x"}
    ).status_code == 422

    recent = api_client.get("/api/v1/daily-log/recent").json()
    assert len(recent) == 1
    assert recent[0]["direction"] == "vision"


def test_weekly_reflection_and_boss_fight_flow(api_client):
    api_client.post("/api/v1/onboarding/quick-setup", json=SETUP)

    resp = api_client.post("/api/v1/weekly-reflections", json={"most_alive": "Flow", "project_progress": 70})
    assert resp.status_code == 200
    assert resp.json()["xp_gained"] == 200
    assert api_client.post("/api/v1/weekly-reflections", json={}).status_code == 409

    overview = api_client.get("/api/v1/boss-fight").json()
    assert overview["boss_fight"]["progress"] == 70
    assert len(overview["weekly_reflections"]) == 1

    assert api_client.put("/api/v1/boss-fight/progress", json={"progress": 80}).json()["progress"] == 80
    assert api_client.put("/api/v1/boss-fight/progress", json={"progress": 180}).status_code == 422

    done = api_client.post("/api/v1/boss-fight/complete", json={
        "was_completed": True, "learnings": "Ship small", "next_project": "Beta users",
    })
    assert done.status_code == 200
    assert done.json()["xp_gained"] == 1000
    assert done.json()["total_xp"] == 1200
    assert done.json()["level"] == 2

    overview = api_client.get("/api/v1/boss-fight").json()
    assert overview["boss_fight"]["project_text"] == "Beta users"
    assert overview["weekly_reflections"] == []
    assert api_client.get("/api/v1/character-sheet").json()["month_project"] == "Beta users"


def test_progress_without_boss_fight_is_404(api_client):
    assert api_client.put("/api/v1/boss-fight/progress", json={"progress": 10}).status_code == 404


def test_revaluing_a_checked_lever_does_not_leak_xp(api_client):
    lever_id = api_client.post("/api/v1/levers", json=[{"lever_text": "Write", "xp_value": 500}]).json()[0]["id"]
    api_client.post(f"/api/v1/levers/{lever_id}/toggle")
    api_client.put(f"/api/v1/levers/{lever_id}", json={"xp_value": 10})

    undone = api_client.post(f"/api/v1/levers/{lever_id}/toggle").json()
    assert undone["xp_change"] == -500
    assert undone["total_xp"] == 0


# --- Production error responses -----------------------------------------------

@pytest.fixture
def production(monkeypatch):
    monkeypatch.setattr("errors.APP_ENV", "production")


def test_production_conflict_shows_only_the_generic_message(api_client, production):
    assert api_client.post("/api/v1/weekly-reflections", json={}).status_code == 200
    resp = api_client.post("/api/v1/weekly-reflections", json={})
    assert resp.status_code == 409
    assert resp.json() == {"detail": ErrorMessages.CONFLICT}


def test_production_not_found_shows_only_the_generic_message(api_client, production):
    resp = api_client.post("/api/v1/levers/nope/toggle")
    assert resp.status_code == 404
    assert resp.json() == {"detail": ErrorMessages.NOT_FOUND}

    resp = api_client.delete("/api/v1/levers/nope")
    assert resp.status_code == 404
    assert resp.json() == {"detail": ErrorMessages.NOT_FOUND}

    resp = api_client.put("/api/v1/boss-fight/progress", json={"progress": 10})
    assert resp.status_code == 404
    assert resp.json() == {"detail": ErrorMessages.NOT_FOUND}


def test_production_validation_error_shows_only_the_generic_message(api_client, production):
    resp = api_client.post("/api/v1/daily-log/direction", json={"direction": "vision", "comment": "  "})
    assert resp.status_code == 400
    assert resp.json() == {"detail": ErrorMessages.INVALID}


def test_production_server_error_shows_only_the_generic_message(api_client, production, monkeypatch):
    def broken(db, user_id):
        raise RuntimeError("could not connect to postgresql://admin:hunter2@db")

    monkeypatch.setattr(LeverService, "get_active", broken)
    resp = api_client.get("/api/v1/levers")
    assert resp.status_code == 500
    assert resp.json() == {"detail": ErrorMessages.GENERIC}


def test_development_keeps_the_error_text(api_client):
    resp = api_client.put("/api/v1/boss-fight/progress", json={"progress": 10})
    assert resp.status_code == 404
    assert resp.json() == {"detail": "No active boss fight"}
