"""Simulated session and role gate.

The session is a single record replaced wholesale on role switch. There is
no login, token or expiry: whoever is in the record is the acting user.
"""
from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from portal.config import get_settings
from portal.schemas.session import PortalSession
from portal.schemas.user import UserRole
from portal.services.storage import StoragePort

logger = logging.getLogger(__name__)

SESSION_KEY = "cabinPortalSession"

# Route prefixes each role may reach
ROLE_ROUTES: dict[UserRole, tuple[str, ...]] = {
    UserRole.renter: ("/dashboard", "/session", "/maintenance", "/community"),
    UserRole.staff: ("/dashboard", "/session", "/community", "/staff"),
    UserRole.admin: ("/dashboard", "/session", "/community", "/staff", "/admin"),
}


def can_access(role: UserRole | str, path: str) -> bool:
    """True if path is one of the role's prefixes or below it."""
    try:
        role = UserRole(role)
    except ValueError:
        return False
    path = "/" + path.strip("/")
    return any(path == prefix or path.startswith(prefix + "/") for prefix in ROLE_ROUTES[role])


class SessionState:
    def __init__(self, storage: StoragePort) -> None:
        self.storage = storage

    def get(self) -> PortalSession | None:
        stored = self.storage.get(SESSION_KEY)
        if not stored:
            return None
        try:
            return PortalSession.model_validate(json.loads(stored))
        except (ValueError, ValidationError):
            logger.warning("Stored session is malformed; treating as signed out.")
            return None

    def set(self, session: PortalSession) -> PortalSession:
        if session.role != UserRole.renter:
            session = session.model_copy(update={"cabin_id": None})
        self.storage.set(SESSION_KEY, json.dumps(session.to_record()))
        logger.info("Session switched: role=%s user=%s property=%s", session.role.value, session.user_id, session.property_id)
        return session

    def clear(self) -> None:
        self.storage.remove(SESSION_KEY)

    def is_authenticated(self) -> bool:
        return self.get() is not None

    def has_role(self, role: UserRole) -> bool:
        session = self.get()
        return session is not None and session.role == role

    def has_any_role(self, roles: list[UserRole]) -> bool:
        session = self.get()
        return session is not None and session.role in roles

    def current_user_id(self) -> str | None:
        session = self.get()
        return session.user_id if session else None

    def current_property_id(self) -> str | None:
        session = self.get()
        return session.property_id if session else None

    def current_cabin_id(self) -> str | None:
        session = self.get()
        return session.cabin_id if session else None

    def initialize_demo_session(self) -> PortalSession | None:
        """First run: act as the configured demo Renter. Leaves an existing session alone."""
        if self.is_authenticated():
            return None
        settings = get_settings()
        return self.set(
            PortalSession(
                role=UserRole(settings.demo_role),
                user_id=settings.demo_user_id,
                property_id=settings.demo_property_id,
                cabin_id=settings.demo_cabin_id or None,
            )
        )
