"""Shared base for portal schemas: camelCase on the wire, snake_case in Python."""
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class PortalModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_record(self, **kwargs: Any) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys, as stored in fixtures and overlays."""
        return self.model_dump(mode="json", by_alias=True, **kwargs)


def strip_required(value: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError("must not be empty")
    return value


def not_null(value: Any) -> Any:
    # Patch fields may be omitted, never null
    if value is None:
        raise ValueError("must not be null")
    return value
