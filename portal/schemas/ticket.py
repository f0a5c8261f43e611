"""Maintenance ticket schemas."""
import enum
from datetime import datetime

from pydantic import field_validator, model_validator

from portal.schemas.base import PortalModel, not_null, strip_required


class TicketStatus(str, enum.Enum):
    """Open -> Assigned -> In Progress -> Resolved/Closed. Not enforced; any status can be set."""
    open = "Open"
    assigned = "Assigned"
    in_progress = "In Progress"
    resolved = "Resolved"
    closed = "Closed"


CLOSED_STATUSES = (TicketStatus.resolved.value, TicketStatus.closed.value)


class TicketPriority(str, enum.Enum):
    low = "Low"
    medium = "Medium"
    high = "High"
    urgent = "Urgent"


MAINTENANCE_CATEGORIES: dict[str, list[str]] = {
    "Plumbing": ["Leak", "Clog", "Water Pressure", "Other"],
    "Electrical": ["Outlet", "Light Fixture", "Breaker", "Other"],
    "HVAC": ["Heating", "Cooling", "Thermostat", "Other"],
    "Appliances": ["Refrigerator", "Dishwasher", "Washer/Dryer", "Other"],
    "Structural": ["Door", "Window", "Roof", "Floor", "Other"],
    "Other": ["Other"],
}


def check_category(category: str | None, subcategory: str | None) -> None:
    if category is None:
        return
    if category not in MAINTENANCE_CATEGORIES:
        raise ValueError(f"unknown category {category!r}")
    if subcategory is not None and subcategory not in MAINTENANCE_CATEGORIES[category]:
        raise ValueError(f"unknown subcategory {subcategory!r} for {category}")


class Ticket(PortalModel):
    id: str
    property_id: str
    cabin_id: str
    created_by_user_id: str
    assigned_to_user_id: str | None = None
    category: str
    subcategory: str
    priority: TicketPriority
    status: TicketStatus
    description: str
    created_at: datetime
    updated_at: datetime


class TicketCreate(PortalModel):
    property_id: str | None = None  # defaults to the session property
    cabin_id: str | None = None  # defaults to the session cabin
    category: str
    subcategory: str
    priority: TicketPriority = TicketPriority.medium
    description: str

    @field_validator("description")
    @classmethod
    def required_text(cls, v: str) -> str:
        return strip_required(v)

    @model_validator(mode="after")
    def known_category(self):
        check_category(self.category, self.subcategory)
        return self


class TicketUpdate(PortalModel):
    """All optional; only provided fields are patched. Only the assignee may be cleared with null."""
    status: TicketStatus | None = None
    priority: TicketPriority | None = None
    assigned_to_user_id: str | None = None
    category: str | None = None
    subcategory: str | None = None
    description: str | None = None

    @field_validator("status", "priority", "category", "subcategory")
    @classmethod
    def present(cls, v):
        return not_null(v)

    @field_validator("description")
    @classmethod
    def required_text(cls, v: str | None) -> str:
        return strip_required(not_null(v))

    @model_validator(mode="after")
    def known_category(self):
        check_category(self.category, self.subcategory)
        return self


class StaffTicketQueue(PortalModel):
    unassigned: list[Ticket]  # at the session property
    assigned_to_me: list[Ticket]
