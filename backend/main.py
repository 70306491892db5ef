import os
import sys
import logging

# Ensure this directory is in the path for Vercel and other runners
current_dir = os.path.dirname(os.path.abspath(__file__))
if current_dir not in sys.path:
    sys.path.append(current_dir)

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import APP_NAME, CORS_ORIGINS
from database import init_db
from errors import FixItError, public_detail, status_for
from routes.dashboard_routes import router as dashboard_router
from routes.character_routes import router as character_router
from routes.lever_routes import router as lever_router
from routes.daily_log_routes import router as daily_log_router
from routes.boss_fight_routes import router as boss_fight_router
from routes.reflection_routes import router as reflection_router

logger = logging.getLogger(__name__)

# Initialize db configuration
try:
    init_db()
except Exception as e:
    logger.error(f"Database init skipped or failed: {e}")

app = FastAPI(title=APP_NAME)


@app.exception_handler(FixItError)
async def fixit_error_handler(request: Request, exc: FixItError):
    code = status_for(exc)
    if code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=code, content={"detail": public_detail(exc)})


@app.get("/api/v1/health-check")
async def health():
    return {"status": "ok", "message": "Backend is alive!"}


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(dashboard_router)
app.include_router(character_router)
app.include_router(lever_router)
app.include_router(daily_log_router)
app.include_router(boss_fight_router)
app.include_router(reflection_router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
