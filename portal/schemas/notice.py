"""Notices and outages: property-scoped announcements with a time window."""
import enum
from datetime import datetime, timezone

from pydantic import field_validator, model_validator

from portal.schemas.base import PortalModel, not_null, strip_required


class OutageStatus(str, enum.Enum):
    planned = "Planned"
    active = "Active"
    resolved = "Resolved"


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _check_window(starts_at: datetime | None, ends_at: datetime | None) -> None:
    if starts_at is None or ends_at is None:
        return
    if _as_utc(ends_at) < _as_utc(starts_at):
        raise ValueError("ends_at must not be before starts_at")


class Notice(PortalModel):
    id: str
    property_id: str
    title: str
    body_markdown: str
    starts_at: datetime
    ends_at: datetime
    is_pinned: bool = False


class Outage(PortalModel):
    id: str
    property_id: str
    title: str
    body_markdown: str
    starts_at: datetime
    ends_at: datetime
    status: OutageStatus


class _AnnouncementCreate(PortalModel):
    """One input fans out to one record per property."""
    title: str
    body_markdown: str
    starts_at: datetime
    ends_at: datetime
    property_ids: list[str]

    @field_validator("title", "body_markdown")
    @classmethod
    def required_text(cls, v: str) -> str:
        return strip_required(v)

    @field_validator("property_ids")
    @classmethod
    def at_least_one_property(cls, v: list[str]) -> list[str]:
        ids = [p.strip() for p in v if p and p.strip()]
        if not ids:
            raise ValueError("select at least one property")
        return ids

    @model_validator(mode="after")
    def window_in_order(self):
        _check_window(self.starts_at, self.ends_at)
        return self


class NoticeCreate(_AnnouncementCreate):
    is_pinned: bool = False


class OutageCreate(_AnnouncementCreate):
    status: OutageStatus = OutageStatus.planned


class _AnnouncementUpdate(PortalModel):
    """All optional; only provided fields are patched. Null is refused."""
    title: str | None = None
    body_markdown: str | None = None
    starts_at: datetime | None = None
    ends_at: datetime | None = None

    @field_validator("title", "body_markdown")
    @classmethod
    def required_text(cls, v: str | None) -> str:
        return strip_required(not_null(v))

    @field_validator("starts_at", "ends_at")
    @classmethod
    def window_bound(cls, v: datetime | None) -> datetime:
        return not_null(v)

    @model_validator(mode="after")
    def window_in_order(self):
        _check_window(self.starts_at, self.ends_at)
        return self


class NoticeUpdate(_AnnouncementUpdate):
    is_pinned: bool | None = None

    @field_validator("is_pinned")
    @classmethod
    def pinned_flag(cls, v: bool | None) -> bool:
        return not_null(v)


class OutageUpdate(_AnnouncementUpdate):
    status: OutageStatus | None = None

    @field_validator("status")
    @classmethod
    def outage_status(cls, v: OutageStatus | None) -> OutageStatus:
        return not_null(v)
