"""Overlay of locally staged creates/updates/deletes layered on read-only fixtures.

Each kind persists one envelope under a fixed storage key (optionally as a
named section of a shared document, e.g. threads and replies):

    {"created": [record, ...], "updated": {id: patch}, "deleted": [id, ...]}

Kinds without a delete path (tickets, replies) carry no "deleted" list.
The effective dataset is recomputed on every read by merge(); fixtures are
never modified.
"""
from __future__ import annotations

import json
import logging
import secrets
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Callable, Iterator

from portal.services.storage import StoragePort

logger = logging.getLogger(__name__)

Record = dict[str, Any]

TICKETS_OVERLAY_KEY = "cabinPortal_ticketsOverlay"
COMMUNITY_OVERLAY_KEY = "cabinPortal_communityOverlay"
NOTICES_OVERLAY_KEY = "cabinPortal_noticesOverlay"
OUTAGES_OVERLAY_KEY = "cabinPortal_outagesOverlay"
USERS_OVERLAY_KEY = "cabinPortal_usersOverlay"

OVERLAY_KEYS = (
    TICKETS_OVERLAY_KEY,
    COMMUNITY_OVERLAY_KEY,
    NOTICES_OVERLAY_KEY,
    OUTAGES_OVERLAY_KEY,
    USERS_OVERLAY_KEY,
)


def utc_now_iso() -> str:
    """Wall-clock timestamp, e.g. 2025-01-10T09:30:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def generate_id(prefix: str) -> str:
    """Kind-prefixed id, e.g. T-9F3A21C4. No collision check."""
    return f"{prefix}-{secrets.token_hex(4).upper()}"


def _record_id(record: Record) -> str:
    return record["id"]


def starts_at_key(record: Record) -> datetime:
    return parse_timestamp(record["startsAt"])


class Overlay:
    """Generic overlay for one entity kind.

    prefix: id prefix for created records ("T", "TH", ...).
    section: name of this kind's envelope inside a shared persisted document.
    tracks_deletes: whether the envelope has a "deleted" list.
    stamps_updated_at: whether patches re-stamp updatedAt.
    sort_key: applied (descending) after merging, e.g. startsAt for notices.
    """

    def __init__(
        self,
        storage: StoragePort,
        key: str,
        *,
        prefix: str,
        section: str | None = None,
        tracks_deletes: bool = True,
        stamps_updated_at: bool = False,
        sort_key: Callable[[Record], Any] | None = None,
        id_of: Callable[[Record], str] = _record_id,
    ) -> None:
        self.storage = storage
        self.key = key
        self.prefix = prefix
        self.section = section
        self.tracks_deletes = tracks_deletes
        self.stamps_updated_at = stamps_updated_at
        self.sort_key = sort_key
        self.id_of = id_of

    def empty_envelope(self) -> dict[str, Any]:
        envelope: dict[str, Any] = {"created": [], "updated": {}}
        if self.tracks_deletes:
            envelope["deleted"] = []
        return envelope

    def _normalize(self, raw: Any) -> dict[str, Any]:
        """Fill missing or mistyped envelope fields with defaults."""
        envelope = self.empty_envelope()
        if not isinstance(raw, dict):
            return envelope
        if isinstance(raw.get("created"), list):
            envelope["created"] = [r for r in raw["created"] if isinstance(r, dict)]
        if isinstance(raw.get("updated"), dict):
            envelope["updated"] = {
                str(k): v for k, v in raw["updated"].items() if isinstance(v, dict)
            }
        if self.tracks_deletes and isinstance(raw.get("deleted"), list):
            envelope["deleted"] = [str(i) for i in raw["deleted"]]
        return envelope

    def _load_document(self) -> dict[str, Any]:
        stored = self.storage.get(self.key)
        if not stored:
            return {}
        try:
            document = json.loads(stored)
        except ValueError:
            logger.warning("Overlay %s is not valid JSON; starting from an empty overlay.", self.key)
            return {}
        if not isinstance(document, dict):
            logger.warning("Overlay %s is not a JSON object; starting from an empty overlay.", self.key)
            return {}
        return document

    def load(self) -> dict[str, Any]:
        document = self._load_document()
        if self.section is None:
            return self._normalize(document)
        return self._normalize(document.get(self.section))

    def save(self, envelope: dict[str, Any]) -> None:
        """Persist the whole envelope (and, for a section, the document holding it)."""
        if self.section is None:
            document: dict[str, Any] = envelope
        else:
            document = self._load_document()
            document[self.section] = envelope
        self.storage.set(self.key, json.dumps(document))

    def staged(self) -> list[Record]:
        return self.load()["created"]

    @contextmanager
    def edit(self) -> Iterator[dict[str, Any]]:
        """Read-modify-write of the envelope; persisted once on exit."""
        envelope = self.load()
        yield envelope
        self.save(envelope)

    def merge(self, base: list[Record], envelope: dict[str, Any] | None = None) -> list[Record]:
        """Effective records: fixtures minus deletes, with patches, plus staged creates.

        Patched records are new dicts; neither base nor its records are mutated.
        No dedup between staged and fixture ids.
        """
        if envelope is None:
            envelope = self.load()
        deleted = set(envelope.get("deleted", ()))
        updated = envelope["updated"]

        merged: list[Record] = []
        for record in base:
            record_id = self.id_of(record)
            if record_id in deleted:
                continue
            patch = updated.get(record_id)
            merged.append({**record, **patch} if patch else record)
        merged.extend(envelope["created"])

        if self.sort_key is not None:
            merged = sorted(merged, key=self.sort_key, reverse=True)
        return merged

    def stage(self, records: list[Record]) -> list[Record]:
        """Append new records to created and persist once."""
        with self.edit() as envelope:
            envelope["created"].extend(records)
        logger.info("Overlay %s: staged %d record(s)", self.key, len(records))
        return records

    def apply_patch(self, envelope: dict[str, Any], record_id: str, fields: dict[str, Any]) -> Record:
        """Patch within a loaded envelope; see patch()."""
        fields = {k: v for k, v in fields.items() if k != "id"}
        if self.stamps_updated_at:
            fields["updatedAt"] = utc_now_iso()
        for record in envelope["created"]:
            if self.id_of(record) == record_id:
                record.update(fields)
                return record
        # Later patches overwrite earlier ones key by key
        accumulated = {**envelope["updated"].get(record_id, {}), **fields}
        envelope["updated"][record_id] = accumulated
        return accumulated

    def patch(self, record_id: str, fields: dict[str, Any]) -> Record:
        """Apply fields to a staged record in place, else accumulate into updated[record_id].

        Returns the staged record, or the accumulated patch for a fixture record.
        """
        with self.edit() as envelope:
            result = self.apply_patch(envelope, record_id, fields)
        logger.info("Overlay %s: patched %s (%s)", self.key, record_id, ", ".join(sorted(fields)))
        return result

    def remove(self, record_id: str) -> None:
        """Drop a staged record, else hide the fixture record. Repeated calls are no-ops."""
        if not self.tracks_deletes:
            raise TypeError(f"Overlay {self.key} does not support deletes")
        with self.edit() as envelope:
            created = envelope["created"]
            remaining = [r for r in created if self.id_of(r) != record_id]
            if len(remaining) != len(created):
                envelope["created"] = remaining
            elif record_id not in envelope["deleted"]:
                envelope["deleted"].append(record_id)
        logger.info("Overlay %s: deleted %s", self.key, record_id)


class OverlayStore:
    """All overlays over one storage port."""

    def __init__(self, storage: StoragePort) -> None:
        self.storage = storage
        self.tickets = Overlay(
            storage, TICKETS_OVERLAY_KEY, prefix="T", tracks_deletes=False, stamps_updated_at=True
        )
        self.threads = Overlay(
            storage, COMMUNITY_OVERLAY_KEY, prefix="TH", section="threads", stamps_updated_at=True
        )
        self.replies = Overlay(
            storage, COMMUNITY_OVERLAY_KEY, prefix="RP", section="replies", tracks_deletes=False
        )
        self.notices = Overlay(storage, NOTICES_OVERLAY_KEY, prefix="N", sort_key=starts_at_key)
        self.outages = Overlay(storage, OUTAGES_OVERLAY_KEY, prefix="O", sort_key=starts_at_key)
        self.users = Overlay(storage, USERS_OVERLAY_KEY, prefix="U")

    def clear(self) -> None:
        """Drop all simulated data."""
        for key in OVERLAY_KEYS:
            self.storage.remove(key)
        logger.info("Cleared all overlays")
