"""User administration: create with signup token, revoke access, delete.

At most one active user holds a cabin. The holder lookup and the write
happen in one read-modify-write of the users overlay.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any

from portal.config import get_settings
from portal.exceptions import CabinConflictError
from portal.schemas.user import UserCreate, UserRole
from portal.services.overlay import OverlayStore, generate_id

logger = logging.getLogger(__name__)


def find_cabin_holder(users: list[dict[str, Any]], cabin_id: str | None) -> dict[str, Any] | None:
    """Active user currently assigned to cabin_id. A missing isActive counts as active."""
    if not cabin_id:
        return None
    for user in users:
        if user.get("cabinId") == cabin_id and user.get("isActive") is not False:
            return user
    return None


def _revoked_fields() -> dict[str, Any]:
    return {"isActive": False, "cabinId": None}


def create_user(
    overlays: OverlayStore,
    base_users: list[dict[str, Any]],
    data: UserCreate,
) -> dict[str, Any]:
    """Stage a new user awaiting signup (isActive false until signup completes).

    If the cabin is held by an active user, raises CabinConflictError unless
    data.revoke_conflicting is set, in which case the holder is revoked first.
    """
    overlay = overlays.users
    with overlay.edit() as envelope:
        cabin_id = data.cabin_id if data.role == UserRole.renter else None
        holder = find_cabin_holder(overlay.merge(base_users, envelope), cabin_id)
        if holder is not None:
            if not data.revoke_conflicting:
                logger.info("Cabin %s already held by %s; user not created", cabin_id, holder.get("id"))
                raise CabinConflictError(cabin_id, holder)
            overlay.apply_patch(envelope, holder["id"], _revoked_fields())
            logger.info("Revoked %s to free cabin %s", holder.get("id"), cabin_id)

        user = {
            "id": generate_id(overlay.prefix),
            "email": data.email,
            "name": data.name,
            "role": data.role.value,
            "propertyIds": [data.property_id],
            "cabinId": cabin_id,
            "signupToken": str(uuid.uuid4()),
            "isActive": False,
        }
        envelope["created"].append(user)
    logger.info("Created user %s (%s)", user["id"], user["role"])
    return user


def revoke_user_access(overlays: OverlayStore, user_id: str) -> dict[str, Any]:
    """Deactivate and release the cabin."""
    return overlays.users.patch(user_id, _revoked_fields())


def delete_user(overlays: OverlayStore, user_id: str) -> None:
    overlays.users.remove(user_id)


def get_signup_url(token: str) -> str:
    return f"{get_settings().public_base_url}signup/{token}"
