"""Read paths: fetch fixtures, merge overlays, then filter/sort per screen.

Merging happens before filtering so locally created records obey the same
filters as fixture records. Lookups by id return None when not found.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from portal.schemas.ticket import CLOSED_STATUSES
from portal.services.fixtures import FixtureStore
from portal.services.overlay import OverlayStore, parse_timestamp

Record = dict[str, Any]


def _find(records: list[Record], record_id: str) -> Record | None:
    return next((r for r in records if r.get("id") == record_id), None)


def _is_active(record: Record, now: datetime) -> bool:
    return parse_timestamp(record["startsAt"]) <= now <= parse_timestamp(record["endsAt"])


def _now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    return now if now.tzinfo else now.replace(tzinfo=timezone.utc)


# Properties and cabins (fixtures only)

def get_properties(fixtures: FixtureStore) -> list[Record]:
    return fixtures.properties()


def get_property(fixtures: FixtureStore, property_id: str) -> Record | None:
    return _find(fixtures.properties(), property_id)


def get_cabins(fixtures: FixtureStore) -> list[Record]:
    return fixtures.cabins()


def get_cabins_by_property(fixtures: FixtureStore, property_id: str) -> list[Record]:
    return [c for c in fixtures.cabins() if c.get("propertyId") == property_id]


def get_cabin(fixtures: FixtureStore, cabin_id: str) -> Record | None:
    return _find(fixtures.cabins(), cabin_id)


# Users

def get_users(fixtures: FixtureStore, overlays: OverlayStore) -> list[Record]:
    return overlays.users.merge(fixtures.users())


def get_user(fixtures: FixtureStore, overlays: OverlayStore, user_id: str) -> Record | None:
    return _find(get_users(fixtures, overlays), user_id)


def get_users_by_role(fixtures: FixtureStore, overlays: OverlayStore, role: str) -> list[Record]:
    return [u for u in get_users(fixtures, overlays) if u.get("role") == role]


# Tickets

def get_tickets(fixtures: FixtureStore, overlays: OverlayStore) -> list[Record]:
    return overlays.tickets.merge(fixtures.tickets())


def get_ticket(fixtures: FixtureStore, overlays: OverlayStore, ticket_id: str) -> Record | None:
    return _find(get_tickets(fixtures, overlays), ticket_id)


def get_my_tickets(fixtures: FixtureStore, overlays: OverlayStore, user_id: str) -> list[Record]:
    """Tickets created by user_id."""
    return [t for t in get_tickets(fixtures, overlays) if t.get("createdByUserId") == user_id]


def get_my_open_tickets(fixtures: FixtureStore, overlays: OverlayStore, user_id: str) -> list[Record]:
    return [t for t in get_my_tickets(fixtures, overlays, user_id) if t.get("status") not in CLOSED_STATUSES]


def get_tickets_by_property(fixtures: FixtureStore, overlays: OverlayStore, property_id: str) -> list[Record]:
    return [t for t in get_tickets(fixtures, overlays) if t.get("propertyId") == property_id]


def get_assigned_tickets(fixtures: FixtureStore, overlays: OverlayStore, user_id: str) -> list[Record]:
    return [t for t in get_tickets(fixtures, overlays) if t.get("assignedToUserId") == user_id]


def get_unassigned_tickets(fixtures: FixtureStore, overlays: OverlayStore, property_id: str) -> list[Record]:
    return [
        t for t in get_tickets(fixtures, overlays)
        if t.get("propertyId") == property_id and not t.get("assignedToUserId")
    ]


# Notices and outages (merged lists are sorted by startsAt, newest first)

def get_notices(fixtures: FixtureStore, overlays: OverlayStore) -> list[Record]:
    return overlays.notices.merge(fixtures.notices())


def get_notice(fixtures: FixtureStore, overlays: OverlayStore, notice_id: str) -> Record | None:
    return _find(get_notices(fixtures, overlays), notice_id)


def get_notices_by_property(fixtures: FixtureStore, overlays: OverlayStore, property_id: str) -> list[Record]:
    return [n for n in get_notices(fixtures, overlays) if n.get("propertyId") == property_id]


def get_active_notices(
    fixtures: FixtureStore,
    overlays: OverlayStore,
    property_id: str,
    now: datetime | None = None,
) -> list[Record]:
    now = _now(now)
    return [n for n in get_notices_by_property(fixtures, overlays, property_id) if _is_active(n, now)]


def get_outages(fixtures: FixtureStore, overlays: OverlayStore) -> list[Record]:
    return overlays.outages.merge(fixtures.outages())


def get_outage(fixtures: FixtureStore, overlays: OverlayStore, outage_id: str) -> Record | None:
    return _find(get_outages(fixtures, overlays), outage_id)


def get_outages_by_property(fixtures: FixtureStore, overlays: OverlayStore, property_id: str) -> list[Record]:
    return [o for o in get_outages(fixtures, overlays) if o.get("propertyId") == property_id]


def get_active_outages(
    fixtures: FixtureStore,
    overlays: OverlayStore,
    property_id: str,
    now: datetime | None = None,
) -> list[Record]:
    now = _now(now)
    return [o for o in get_outages_by_property(fixtures, overlays, property_id) if _is_active(o, now)]


# Community

def get_all_threads(fixtures: FixtureStore, overlays: OverlayStore) -> list[Record]:
    return overlays.threads.merge(fixtures.community()["threads"])


def get_threads(fixtures: FixtureStore, overlays: OverlayStore, property_id: str) -> list[Record]:
    """Board order: pinned threads first, then most recently updated."""
    threads = [t for t in get_all_threads(fixtures, overlays) if t.get("propertyId") == property_id]
    pinned = [t for t in threads if t.get("isPinned")]
    regular = sorted(
        (t for t in threads if not t.get("isPinned")),
        key=lambda t: parse_timestamp(t["updatedAt"]),
        reverse=True,
    )
    return pinned + regular


def get_thread(fixtures: FixtureStore, overlays: OverlayStore, thread_id: str) -> Record | None:
    thread = _find(get_all_threads(fixtures, overlays), thread_id)
    if thread is None:
        return None
    return {"isPinned": False, "isLocked": False, **thread}


def get_thread_replies(fixtures: FixtureStore, overlays: OverlayStore, thread_id: str) -> list[Record]:
    """Oldest first."""
    replies = overlays.replies.merge(fixtures.community()["replies"])
    return sorted(
        (r for r in replies if r.get("threadId") == thread_id),
        key=lambda r: parse_timestamp(r["createdAt"]),
    )


# Knowledge base (fixtures only)

def get_kb_articles(fixtures: FixtureStore) -> list[Record]:
    return fixtures.kb_articles()


def get_kb_articles_by_property(fixtures: FixtureStore, property_id: str) -> list[Record]:
    return [a for a in fixtures.kb_articles() if a.get("propertyId") == property_id]


def get_kb_article(fixtures: FixtureStore, article_id: str) -> Record | None:
    return _find(fixtures.kb_articles(), article_id)
