from __future__ import annotations

import copy
import json

import pytest

from conftest import seed_copy
from portal.services.overlay import (
    COMMUNITY_OVERLAY_KEY,
    NOTICES_OVERLAY_KEY,
    TICKETS_OVERLAY_KEY,
    USERS_OVERLAY_KEY,
    Overlay,
    OverlayStore,
    starts_at_key,
)
from portal.services.storage import MemoryStorage


def _notice(notice_id: str, starts_at: str) -> dict:
    return {
        "id": notice_id,
        "propertyId": "P-001",
        "title": notice_id,
        "bodyMarkdown": "",
        "startsAt": starts_at,
        "endsAt": "2099-01-01T00:00:00.000Z",
        "isPinned": False,
    }


class CountingStorage(MemoryStorage):
    def __init__(self) -> None:
        super().__init__()
        self.writes = 0

    def set(self, key: str, value: str) -> None:
        self.writes += 1
        super().set(key, value)


def test_merge_without_overlay_returns_fixtures_in_order(overlays) -> None:
    tickets = seed_copy("tickets.json")
    assert overlays.tickets.merge(tickets) == tickets


def test_merge_drops_deleted_ids(overlays) -> None:
    notices = seed_copy("notices.json")
    overlays.notices.remove("N-001")
    overlays.notices.remove("N-003")

    merged = overlays.notices.merge(notices)

    assert {n["id"] for n in merged} == {"N-002"}


def test_created_record_appears_exactly_once_with_prefix(overlays) -> None:
    overlay = overlays.tickets
    record = {"id": "T-NEW1", "status": "Open"}
    overlay.stage([record])

    merged = overlay.merge(seed_copy("tickets.json"))

    assert [t["id"] for t in merged].count("T-NEW1") == 1
    assert merged[-1] == record


def test_merge_is_idempotent(overlays) -> None:
    notices = seed_copy("notices.json")
    overlays.notices.stage([_notice("N-100", "2025-01-07T00:00:00.000Z")])
    overlays.notices.patch("N-002", {"title": "Plow schedule"})
    overlays.notices.remove("N-003")

    assert overlays.notices.merge(notices) == overlays.notices.merge(notices)


def test_update_then_merge_changes_only_patched_field(overlays) -> None:
    tickets = seed_copy("tickets.json")
    original = copy.deepcopy(tickets[0])

    overlays.tickets.patch("T-001", {"status": "Resolved"})
    merged = {t["id"]: t for t in overlays.tickets.merge(tickets)}

    assert merged["T-001"]["status"] == "Resolved"
    unchanged = {k: v for k, v in merged["T-001"].items() if k not in ("status", "updatedAt")}
    assert unchanged == {k: v for k, v in original.items() if k not in ("status", "updatedAt")}
    assert merged["T-001"]["updatedAt"] != original["updatedAt"]
    assert tickets[0] == original


def test_patches_accumulate_per_key(overlays) -> None:
    overlays.notices.patch("N-001", {"title": "A", "isPinned": False})
    overlays.notices.patch("N-001", {"title": "B"})

    envelope = overlays.notices.load()

    assert envelope["updated"]["N-001"] == {"title": "B", "isPinned": False}


def test_patch_on_staged_record_updates_in_place(overlays) -> None:
    overlays.threads.stage([{"id": "TH-NEW", "isLocked": False, "updatedAt": "2025-01-01T00:00:00.000Z"}])

    overlays.threads.patch("TH-NEW", {"isLocked": True})
    envelope = overlays.threads.load()

    assert envelope["updated"] == {}
    assert envelope["created"][0]["isLocked"] is True
    assert envelope["created"][0]["updatedAt"] != "2025-01-01T00:00:00.000Z"


def test_patch_does_not_stamp_kinds_without_updated_at(overlays) -> None:
    overlays.notices.patch("N-001", {"title": "x"})
    assert overlays.notices.load()["updated"]["N-001"] == {"title": "x"}


def test_patch_ignores_id_field(overlays) -> None:
    overlays.users.patch("U-1001", {"id": "U-EVIL", "name": "Rita"})
    assert overlays.users.load()["updated"]["U-1001"] == {"name": "Rita"}


def test_delete_staged_record_removes_it_entirely(overlays) -> None:
    overlays.notices.stage([_notice("N-100", "2025-01-07T00:00:00.000Z")])

    overlays.notices.remove("N-100")
    envelope = overlays.notices.load()

    assert envelope["created"] == []
    assert envelope["deleted"] == []
    assert "N-100" not in {n["id"] for n in overlays.notices.merge(seed_copy("notices.json"))}


def test_delete_fixture_record_hides_it_without_touching_fixtures(overlays) -> None:
    notices = seed_copy("notices.json")
    snapshot = copy.deepcopy(notices)
    first = notices[0]

    overlays.notices.remove("N-001")
    merged = overlays.notices.merge(notices)

    assert "N-001" not in {n["id"] for n in merged}
    assert notices == snapshot
    assert notices[0] is first


def test_delete_is_idempotent(overlays) -> None:
    overlays.users.remove("U-1002")
    overlays.users.remove("U-1002")

    assert overlays.users.load()["deleted"] == ["U-1002"]


def test_kinds_without_deletes_reject_remove(overlays) -> None:
    with pytest.raises(TypeError):
        overlays.tickets.remove("T-001")
    with pytest.raises(TypeError):
        overlays.replies.remove("RP-001")
    assert "deleted" not in overlays.tickets.load()


def test_notices_sorted_by_starts_at_descending(overlays) -> None:
    base = [
        _notice("early", "2025-01-01T00:00:00.000Z"),
        _notice("late", "2025-01-10T00:00:00.000Z"),
    ]
    merged = overlays.notices.merge(base)
    assert [n["id"] for n in merged] == ["late", "early"]


def test_sort_places_staged_records_by_start(overlays) -> None:
    overlays.outages.stage([{**_notice("O-NEW", "2025-02-01T00:00:00Z"), "status": "Planned"}])
    merged = overlays.outages.merge(seed_copy("outages.json"))
    assert [o["id"] for o in merged] == ["O-002", "O-NEW", "O-001"]


def test_no_dedup_when_staged_id_collides_with_fixture(overlays) -> None:
    overlays.tickets.stage([{"id": "T-001", "status": "Open"}])
    merged = overlays.tickets.merge(seed_copy("tickets.json"))
    assert [t["id"] for t in merged].count("T-001") == 2


def test_corrupt_overlay_is_replaced_with_empty_default(storage) -> None:
    storage.set(TICKETS_OVERLAY_KEY, "{not json")
    overlays = OverlayStore(storage)

    assert overlays.tickets.load() == {"created": [], "updated": {}}
    assert overlays.tickets.merge(seed_copy("tickets.json")) == seed_copy("tickets.json")


def test_non_object_overlay_is_replaced_with_empty_default(storage) -> None:
    storage.set(NOTICES_OVERLAY_KEY, json.dumps(["N-001"]))
    assert OverlayStore(storage).notices.load() == {"created": [], "updated": {}, "deleted": []}


def test_envelope_missing_deleted_gets_default(storage) -> None:
    storage.set(USERS_OVERLAY_KEY, json.dumps({"created": [], "updated": {"U-1001": {"name": "R"}}}))
    envelope = OverlayStore(storage).users.load()
    assert envelope == {"created": [], "updated": {"U-1001": {"name": "R"}}, "deleted": []}


def test_threads_and_replies_share_one_document(storage) -> None:
    overlays = OverlayStore(storage)
    overlays.threads.stage([{"id": "TH-NEW"}])
    overlays.replies.stage([{"id": "RP-NEW", "threadId": "TH-NEW"}])
    overlays.threads.remove("TH-001")

    document = json.loads(storage.get(COMMUNITY_OVERLAY_KEY))

    assert document["threads"] == {"created": [{"id": "TH-NEW"}], "updated": {}, "deleted": ["TH-001"]}
    assert document["replies"] == {"created": [{"id": "RP-NEW", "threadId": "TH-NEW"}], "updated": {}}


def test_stage_persists_once_for_many_records() -> None:
    storage = CountingStorage()
    overlay = Overlay(storage, NOTICES_OVERLAY_KEY, prefix="N", sort_key=starts_at_key)

    overlay.stage([_notice("N-A", "2025-01-01T00:00:00Z"), _notice("N-B", "2025-01-01T00:00:00Z")])

    assert storage.writes == 1


def test_custom_id_extraction() -> None:
    overlay = Overlay(MemoryStorage(), "custom", prefix="X", id_of=lambda r: r["code"])
    overlay.remove("b")
    assert overlay.merge([{"code": "a"}, {"code": "b"}]) == [{"code": "a"}]


def test_clear_drops_every_overlay(storage) -> None:
    overlays = OverlayStore(storage)
    overlays.tickets.stage([{"id": "T-NEW"}])
    overlays.users.remove("U-1001")
    overlays.replies.stage([{"id": "RP-NEW"}])

    overlays.clear()

    assert overlays.tickets.load() == {"created": [], "updated": {}}
    assert overlays.users.load()["deleted"] == []
    assert overlays.replies.staged() == []
