"""Notices and outages. One creation input fans out to one record per property."""
from __future__ import annotations

from typing import Any

from portal.schemas.notice import NoticeCreate, NoticeUpdate, OutageCreate, OutageUpdate
from portal.services.overlay import Overlay, OverlayStore, generate_id, parse_timestamp


def _fan_out(overlay: Overlay, data: NoticeCreate | OutageCreate, extra: dict[str, Any]) -> list[dict[str, Any]]:
    shared = data.to_record(include={"title", "body_markdown", "starts_at", "ends_at"})
    records = [
        {"id": generate_id(overlay.prefix), "propertyId": property_id, **shared, **extra}
        for property_id in data.property_ids
    ]
    # All records are staged before the single persist.
    return overlay.stage(records)


def _patch_announcement(overlay: Overlay, record: dict[str, Any], fields: dict[str, Any]) -> dict[str, Any]:
    # A one-sided patch is checked against the stored other bound
    starts_at = fields.get("startsAt", record.get("startsAt"))
    ends_at = fields.get("endsAt", record.get("endsAt"))
    if starts_at and ends_at and parse_timestamp(ends_at) < parse_timestamp(starts_at):
        raise ValueError("endsAt must not be before startsAt")
    return overlay.patch(record["id"], fields)


def create_notice(overlays: OverlayStore, data: NoticeCreate) -> list[dict[str, Any]]:
    return _fan_out(overlays.notices, data, {"isPinned": data.is_pinned})


def update_notice(overlays: OverlayStore, notice: dict[str, Any], data: NoticeUpdate | dict[str, Any]) -> dict[str, Any]:
    fields = data.to_record(exclude_unset=True) if isinstance(data, NoticeUpdate) else dict(data)
    return _patch_announcement(overlays.notices, notice, fields)


def delete_notice(overlays: OverlayStore, notice_id: str) -> None:
    overlays.notices.remove(notice_id)


def create_outage(overlays: OverlayStore, data: OutageCreate) -> list[dict[str, Any]]:
    return _fan_out(overlays.outages, data, {"status": data.status.value})


def update_outage(overlays: OverlayStore, outage: dict[str, Any], data: OutageUpdate | dict[str, Any]) -> dict[str, Any]:
    fields = data.to_record(exclude_unset=True) if isinstance(data, OutageUpdate) else dict(data)
    return _patch_announcement(overlays.outages, outage, fields)


def delete_outage(overlays: OverlayStore, outage_id: str) -> None:
    overlays.outages.remove(outage_id)
