from datetime import date, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from database import unit_of_work
from errors import ConflictError, ErrorMessages, NotFoundError, WriteFailure
from models.daily_log import DailyLog
from models.user import User
from services.daily_log_service import DailyLogService, utc_today
from services.lever_service import LeverService


def _refresh(db):
    db.expire_all()


def test_get_missing_log_is_none(db, user_id):
    assert DailyLogService.get(db, user_id) is None


def test_save_is_an_upsert_per_user_and_day(db, make_user):
    uid = make_user()
    with unit_of_work(db):
        first = DailyLogService.save(db, uid, direction="hate", comment="doomscrolled")
    with unit_of_work(db):
        second = DailyLogService.save(db, uid, direction="vision", comment="shipped it")

    assert first.id == second.id
    assert db.query(DailyLog).filter_by(user_id=uid).count() == 1
    assert second.direction == "vision"
    assert second.levers_completed == []
    assert second.xp_gained == 0


def test_logs_are_keyed_by_date(db, make_user):
    uid = make_user()
    yesterday = utc_today() - timedelta(days=1)
    with unit_of_work(db):
        DailyLogService.save(db, uid, date=yesterday, comment="yesterday")
        DailyLogService.save(db, uid, comment="today")
    assert DailyLogService.get(db, uid, yesterday).comment == "yesterday"
    assert DailyLogService.get(db, uid).comment == "today"


def test_toggle_then_untoggle_restores_everything(db, make_user, make_lever):
    uid = make_user(total_xp=450)
    lever = make_lever(uid, xp_value=50)

    with unit_of_work(db):
        xp_change, done = DailyLogService.toggle_lever(db, uid, lever.id)
    assert (xp_change, done) == (50, True)
    _refresh(db)
    log = DailyLogService.get(db, uid)
    user = db.query(User).filter_by(id=uid).one()
    assert log.levers_completed == [lever.id]
    assert log.xp_gained == 50
    assert (user.total_xp, user.current_level) == (500, 2)

    with unit_of_work(db):
        xp_change, done = DailyLogService.toggle_lever(db, uid, lever.id)
    assert (xp_change, done) == (-50, False)
    _refresh(db)
    log = DailyLogService.get(db, uid)
    user = db.query(User).filter_by(id=uid).one()
    assert log.levers_completed == []
    assert log.xp_gained == 0
    assert (user.total_xp, user.current_level) == (450, 1)


def test_toggle_keeps_other_levers(db, make_user, make_lever):
    uid = make_user()
    a = make_lever(uid, "Read", xp_value=25, order=0)
    b = make_lever(uid, "Run", xp_value=75, order=1)
    with unit_of_work(db):
        DailyLogService.toggle_lever(db, uid, a.id)
        DailyLogService.toggle_lever(db, uid, b.id)
        DailyLogService.toggle_lever(db, uid, a.id)
    _refresh(db)
    log = DailyLogService.get(db, uid)
    assert log.levers_completed == [b.id]
    assert log.xp_gained == 75


def test_toggle_unknown_lever(db, make_user):
    uid = make_user()
    with pytest.raises(NotFoundError):
        with unit_of_work(db):
            DailyLogService.toggle_lever(db, uid, "missing")
    assert DailyLogService.get(db, uid) is None


def test_toggle_someone_elses_lever(db, make_user, make_lever):
    owner = make_user()
    other = make_user()
    lever = make_lever(owner)
    with pytest.raises(NotFoundError):
        with unit_of_work(db):
            DailyLogService.toggle_lever(db, other, lever.id)


def test_inactive_lever_can_only_be_unchecked(db, make_user, make_lever):
    uid = make_user()
    lever = make_lever(uid, xp_value=40)
    with unit_of_work(db):
        DailyLogService.toggle_lever(db, uid, lever.id)
        LeverService.deactivate_levers(db, uid, [lever.id])

    with unit_of_work(db):
        xp_change, done = DailyLogService.toggle_lever(db, uid, lever.id)
    assert (xp_change, done) == (-40, False)

    with pytest.raises(ConflictError):
        with unit_of_work(db):
            DailyLogService.toggle_lever(db, uid, lever.id)


def test_stale_log_write_is_a_conflict(db, make_user):
    from database import SessionLocal

    uid = make_user()
    with unit_of_work(db):
        DailyLogService.save(db, uid, comment="first")

    other = SessionLocal()
    try:
        stale = DailyLogService.get(other, uid)
        with unit_of_work(db):
            DailyLogService.save(db, uid, xp_gained=50)
        stale.xp_gained = 10
        with pytest.raises(ConflictError):
            with unit_of_work(other):
                other.flush()
    finally:
        other.close()
    _refresh(db)
    assert DailyLogService.get(db, uid).xp_gained == 50


def test_recent_logs_newest_first(db, make_user):
    uid = make_user()
    today = utc_today()
    with unit_of_work(db):
        for days_ago in (0, 2, 5, 20):
            DailyLogService.save(db, uid, date=today - timedelta(days=days_ago), comment=str(days_ago))
    logs = DailyLogService.get_recent(db, uid, days_back=7)
    assert [l.comment for l in logs] == ["0", "2", "5"]
    assert all(isinstance(l.date, date) for l in logs)


def test_uncheck_takes_back_what_was_credited(db, make_user, make_lever):
    uid = make_user()
    lever = make_lever(uid, xp_value=500)
    with unit_of_work(db):
        DailyLogService.toggle_lever(db, uid, lever.id)
        LeverService.update_lever(db, uid, lever.id, {"xp_value": 10})

    with unit_of_work(db):
        xp_change, done = DailyLogService.toggle_lever(db, uid, lever.id)
    assert (xp_change, done) == (-500, False)
    _refresh(db)
    log = DailyLogService.get(db, uid)
    assert log.lever_credits == {}
    assert log.xp_gained == 0
    assert db.query(User).filter_by(id=uid).one().total_xp == 0

    with unit_of_work(db):
        assert DailyLogService.toggle_lever(db, uid, lever.id) == (10, True)
    _refresh(db)
    assert DailyLogService.get(db, uid).lever_credits == {lever.id: 10}


def test_duplicate_log_conflict_keeps_database_text_out_of_the_error(db, make_user):
    uid = make_user()
    with pytest.raises(ConflictError) as exc_info:
        with unit_of_work(db):
            db.add(DailyLog(user_id=uid, date=date(2026, 1, 1)))
            db.add(DailyLog(user_id=uid, date=date(2026, 1, 1)))
    assert str(exc_info.value) == ErrorMessages.CONFLICT
    assert "INSERT" not in str(exc_info.value)
    assert uid not in str(exc_info.value)


def test_failed_commit_is_a_generic_write_failure(db, make_user, monkeypatch):
    uid = make_user()

    def broken_commit():
        raise OperationalError("UPDATE daily_logs SET comment=?", ("secret",), Exception("disk I/O error"))

    monkeypatch.setattr(db, "commit", broken_commit)
    with pytest.raises(WriteFailure) as exc_info:
        with unit_of_work(db):
            DailyLogService.save(db, uid, comment="secret")
    assert str(exc_info.value) == ErrorMessages.GENERIC
    monkeypatch.undo()
    assert DailyLogService.get(db, uid) is None
