"""Exception hierarchy for the portal services. Routers map these to HTTP responses in main.py."""
from __future__ import annotations

from typing import Any


class PortalError(Exception):
    """Base exception for portal service errors."""


class FixtureError(PortalError):
    """Fixture read failed (network, non-2xx, invalid JSON or unexpected shape)."""

    def __init__(self, message: str, *, filename: str = "", status_code: int | None = None) -> None:
        self.filename = filename
        self.status_code = status_code
        super().__init__(message)


class NotAuthenticatedError(PortalError):
    """No session user id is present for an operation that needs an acting user."""


class CabinConflictError(PortalError):
    """Cabin is already held by an active user; revoke that user and retry."""

    def __init__(self, cabin_id: str, holder: dict[str, Any]) -> None:
        self.cabin_id = cabin_id
        self.holder = holder
        super().__init__(f"Cabin {cabin_id} is already assigned to {holder.get('name') or holder.get('id')}")


class ThreadLockedError(PortalError):
    """Thread is locked; no new replies."""

    def __init__(self, thread_id: str) -> None:
        self.thread_id = thread_id
        super().__init__(f"Thread {thread_id} is locked")
