"""Shared dependencies: storage, overlays, fixtures, current session and role gate."""
from functools import lru_cache

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session
from portal.database import get_db
from portal.schemas.session import PortalSession
from portal.schemas.user import UserRole
from portal.services.fixtures import FixtureStore
from portal.services.overlay import OverlayStore
from portal.services.session import SessionState, can_access
from portal.services.storage import SqlStorage, StoragePort


def get_storage(db: Session = Depends(get_db)) -> StoragePort:
    return SqlStorage(db)


def get_overlays(storage: StoragePort = Depends(get_storage)) -> OverlayStore:
    return OverlayStore(storage)


def get_session_state(storage: StoragePort = Depends(get_storage)) -> SessionState:
    return SessionState(storage)


@lru_cache
def get_fixture_store() -> FixtureStore:
    return FixtureStore.from_settings()


def get_current_session(state: SessionState = Depends(get_session_state)) -> PortalSession:
    session = state.get()
    if session is None:
        raise HTTPException(status_code=401, detail="No active session. Pick a role and user on /session.")
    return session


def require_route_access(
    request: Request,
    session: PortalSession = Depends(get_current_session),
) -> PortalSession:
    """Role gate: the request path must fall under one of the session role's prefixes."""
    if not can_access(session.role, request.url.path):
        raise HTTPException(status_code=403, detail=f"{session.role.value} role cannot access {request.url.path}")
    return session


def require_admin(session: PortalSession = Depends(get_current_session)) -> PortalSession:
    if session.role != UserRole.admin:
        raise HTTPException(status_code=403, detail="Admin role required")
    return session
