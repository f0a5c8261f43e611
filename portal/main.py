"""Cabin Portal – FastAPI application."""
# Load .env before any portal code that might read config
from dotenv import load_dotenv
from pathlib import Path
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from portal.config import get_settings
from portal.database import Base, SessionLocal, engine
# Import models so Base.metadata has all tables before create_all
from portal.models import StoredValue  # noqa: F401
from portal.exceptions import CabinConflictError, FixtureError, NotAuthenticatedError, ThreadLockedError
from portal.routers import announcements, community, dashboard, maintenance, session, simulated_data, staff, users
from portal.schemas.user import CabinConflictResponse, User
from portal.services.session import SessionState
from portal.services.storage import SqlStorage

log = logging.getLogger("uvicorn.error")

settings = get_settings()
app = FastAPI(title=settings.app_name, debug=settings.debug)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(session.router)
app.include_router(dashboard.router)
app.include_router(maintenance.router)
app.include_router(community.router)
app.include_router(staff.router)
app.include_router(announcements.router)
app.include_router(users.router)
app.include_router(simulated_data.router)

if settings.fixtures_dir:
    app.mount("/data", StaticFiles(directory=settings.fixtures_dir), name="fixtures")


@app.exception_handler(FixtureError)
def fixture_error_handler(request: Request, exc: FixtureError):
    log.warning("Fixture read failed for %s: %s", request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@app.exception_handler(NotAuthenticatedError)
def not_authenticated_handler(request: Request, exc: NotAuthenticatedError):
    return JSONResponse(status_code=401, content={"detail": str(exc)})


@app.exception_handler(CabinConflictError)
def cabin_conflict_handler(request: Request, exc: CabinConflictError):
    body = CabinConflictResponse(
        detail=str(exc),
        cabin_id=exc.cabin_id,
        conflicting_user=User.model_validate(exc.holder),
    )
    return JSONResponse(status_code=409, content=body.to_record())


@app.exception_handler(ThreadLockedError)
def thread_locked_handler(request: Request, exc: ThreadLockedError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.on_event("startup")
def startup():
    try:
        Base.metadata.create_all(bind=engine)
        if settings.seed_demo_session:
            db = SessionLocal()
            try:
                seeded = SessionState(SqlStorage(db)).initialize_demo_session()
                if seeded:
                    log.info("Demo session: %s %s at %s", seeded.role.value, seeded.user_id, seeded.property_id)
            finally:
                db.close()
    except Exception as e:
        log.warning("Database startup failed (tables/demo session skipped). Check DATABASE_URL. Error: %s", e)
    if not settings.fixtures_dir:
        log.info("Fixtures are read from %s", settings.fixtures_base_url)


@app.get("/")
def root():
    return {"app": settings.app_name, "status": "ok"}


@app.get("/health")
def health():
    return {"status": "healthy"}
