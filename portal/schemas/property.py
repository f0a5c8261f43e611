"""Properties, cabins and knowledge-base articles (read-only fixtures)."""
from datetime import datetime
from typing import Literal

from portal.schemas.base import PortalModel


class Property(PortalModel):
    id: str
    name: str
    address: str = ""
    timezone: str = "UTC"


class Cabin(PortalModel):
    id: str
    property_id: str
    name: str
    status: Literal["Active", "Maintenance", "Inactive"] = "Active"


class KBArticle(PortalModel):
    id: str
    property_id: str
    title: str
    symptoms: str = ""
    steps_markdown: str = ""
    tags: list[str] = []
    created_by_user_id: str | None = None
    upvotes: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
