from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text

from liferpg.db.base import get_db
from liferpg.core.config import settings
from liferpg.core.logging import configure_logging
from liferpg.routers import users as users_router
from liferpg.routers import profile as profile_router
from liferpg.routers import actions as actions_router
from liferpg.routers import logs as logs_router
from liferpg.routers import habits as habits_router
from liferpg.routers import kanban as kanban_router
from liferpg.routers import energy as energy_router
from liferpg.routers import rewards as rewards_router
from liferpg.routers import weekly as weekly_router
from liferpg.core.errors import (
    LifeRPGException,
    liferpg_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

configure_logging(env=settings.APP_ENV, level=settings.LOG_LEVEL)

app = FastAPI(
    title="Life RPG API",
    description=(
        "**Gamified personal productivity**\n\n"
        "Log actions, habits and kanban tasks to earn XP, levels and streak coins; "
        "manage a daily energy budget.\n\n"
        "Identify the player with the `X-User-Id` header. "
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(LifeRPGException, liferpg_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(users_router.router)
app.include_router(profile_router.router)
app.include_router(actions_router.router)
app.include_router(logs_router.router)
app.include_router(habits_router.router)
app.include_router(kanban_router.router)
app.include_router(energy_router.router)
app.include_router(rewards_router.router)
app.include_router(weekly_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable. Returns HTTP 503 if the DB is down.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except Exception:
        db_status = "unreachable"

    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": db_status},
        )
    return {"status": "ok", "db": "ok", "env": settings.APP_ENV}
