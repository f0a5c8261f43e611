"""Community board schemas."""
from datetime import datetime

from pydantic import field_validator

from portal.schemas.base import PortalModel, strip_required


class Thread(PortalModel):
    id: str
    property_id: str
    created_by_user_id: str
    title: str
    body_markdown: str
    is_pinned: bool = False
    is_locked: bool = False
    created_at: datetime
    updated_at: datetime


class Reply(PortalModel):
    id: str
    thread_id: str
    created_by_user_id: str
    body_markdown: str
    created_at: datetime


class ThreadCreate(PortalModel):
    property_id: str | None = None  # defaults to the session property
    title: str
    body_markdown: str

    @field_validator("title", "body_markdown")
    @classmethod
    def required_text(cls, v: str) -> str:
        return strip_required(v)


class ReplyCreate(PortalModel):
    body_markdown: str

    @field_validator("body_markdown")
    @classmethod
    def required_text(cls, v: str) -> str:
        return strip_required(v)


class ThreadLockRequest(PortalModel):
    is_locked: bool


class ThreadPinRequest(PortalModel):
    is_pinned: bool


class ThreadDetail(PortalModel):
    thread: Thread
    replies: list[Reply]
