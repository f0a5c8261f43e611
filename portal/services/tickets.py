"""Maintenance tickets: create (Renter) and status/assignment updates (Staff/Admin)."""
from __future__ import annotations

from typing import Any

from portal.exceptions import NotAuthenticatedError
from portal.schemas.ticket import TicketCreate, TicketStatus, TicketUpdate, check_category
from portal.services.overlay import OverlayStore, generate_id, utc_now_iso
from portal.services.session import SessionState


def create_ticket(overlays: OverlayStore, session: SessionState, data: TicketCreate) -> dict[str, Any]:
    """Stage a new Open ticket owned by the session user. Property/cabin default to the session's."""
    current = session.get()
    if current is None or not current.user_id:
        raise NotAuthenticatedError("User not authenticated")
    property_id = data.property_id or current.property_id
    cabin_id = data.cabin_id or current.cabin_id
    if not cabin_id:
        raise ValueError("A cabin is required to open a ticket")

    now = utc_now_iso()
    ticket = {
        "id": generate_id(overlays.tickets.prefix),
        "propertyId": property_id,
        "cabinId": cabin_id,
        "createdByUserId": current.user_id,
        "assignedToUserId": None,
        "category": data.category,
        "subcategory": data.subcategory,
        "priority": data.priority.value,
        "status": TicketStatus.open.value,
        "description": data.description,
        "createdAt": now,
        "updatedAt": now,
    }
    overlays.tickets.stage([ticket])
    return ticket


def update_ticket(overlays: OverlayStore, ticket: dict[str, Any], data: TicketUpdate | dict[str, Any]) -> dict[str, Any]:
    """Patch any field of a merged ticket (status, assignee, ...). No transition rules; updatedAt is re-stamped.

    The patched category/subcategory pair must still be in the taxonomy.
    """
    fields = data.to_record(exclude_unset=True) if isinstance(data, TicketUpdate) else dict(data)
    check_category(fields.get("category", ticket.get("category")), fields.get("subcategory", ticket.get("subcategory")))
    return overlays.tickets.patch(ticket["id"], fields)
