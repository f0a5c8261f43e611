"""Community board: threads, replies and admin moderation."""
from __future__ import annotations

from typing import Any

from portal.exceptions import NotAuthenticatedError, ThreadLockedError
from portal.schemas.community import ReplyCreate, ThreadCreate
from portal.services.overlay import OverlayStore, generate_id, utc_now_iso
from portal.services.session import SessionState


def _require_user_id(session: SessionState) -> str:
    user_id = session.current_user_id()
    if not user_id:
        raise NotAuthenticatedError("User not authenticated")
    return user_id


def create_thread(overlays: OverlayStore, session: SessionState, data: ThreadCreate) -> dict[str, Any]:
    user_id = _require_user_id(session)
    now = utc_now_iso()
    thread = {
        "id": generate_id(overlays.threads.prefix),
        "propertyId": data.property_id or session.current_property_id(),
        "createdByUserId": user_id,
        "title": data.title,
        "bodyMarkdown": data.body_markdown,
        "isPinned": False,
        "isLocked": False,
        "createdAt": now,
        "updatedAt": now,
    }
    overlays.threads.stage([thread])
    return thread


def create_reply(
    overlays: OverlayStore,
    session: SessionState,
    thread: dict[str, Any],
    data: ReplyCreate,
) -> dict[str, Any]:
    """Append a reply to an (already merged) thread. Locked threads take no replies."""
    user_id = _require_user_id(session)
    if thread.get("isLocked"):
        raise ThreadLockedError(thread["id"])
    reply = {
        "id": generate_id(overlays.replies.prefix),
        "threadId": thread["id"],
        "createdByUserId": user_id,
        "bodyMarkdown": data.body_markdown,
        "createdAt": utc_now_iso(),
    }
    overlays.replies.stage([reply])
    return reply


def update_thread(overlays: OverlayStore, thread_id: str, fields: dict[str, Any]) -> dict[str, Any]:
    return overlays.threads.patch(thread_id, fields)


def lock_thread(overlays: OverlayStore, thread_id: str, is_locked: bool) -> dict[str, Any]:
    return update_thread(overlays, thread_id, {"isLocked": is_locked})


def pin_thread(overlays: OverlayStore, thread_id: str, is_pinned: bool) -> dict[str, Any]:
    return update_thread(overlays, thread_id, {"isPinned": is_pinned})


def delete_thread(overlays: OverlayStore, thread_id: str) -> None:
    # Replies stay in place; they are orphaned, not cascaded.
    overlays.threads.remove(thread_id)
