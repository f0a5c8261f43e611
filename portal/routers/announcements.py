"""Admin notices and outages. One create fans out to every selected property."""
from fastapi import APIRouter, Depends, HTTPException
from portal.dependencies import get_fixture_store, get_overlays, require_route_access
from portal.schemas.notice import Notice, NoticeCreate, NoticeUpdate, Outage, OutageCreate, OutageUpdate
from portal.schemas.session import PortalSession
from portal.services import announcements, queries
from portal.services.fixtures import FixtureStore
from portal.services.overlay import OverlayStore

router = APIRouter(prefix="/admin", tags=["admin"])


def _check_properties(fixtures: FixtureStore, property_ids: list[str]) -> None:
    known = {p.get("id") for p in queries.get_properties(fixtures)}
    unknown = [p for p in property_ids if p not in known]
    if unknown:
        raise HTTPException(status_code=400, detail=f"Unknown property id(s): {', '.join(unknown)}")


@router.get("/notices", response_model=list[Notice])
def list_notices(
    session: PortalSession = Depends(require_route_access),
    fixtures: FixtureStore = Depends(get_fixture_store),
    overlays: OverlayStore = Depends(get_overlays),
):
    """All properties, newest start first."""
    return queries.get_notices(fixtures, overlays)


@router.post("/notices", response_model=list[Notice], status_code=201)
def create_notices(
    data: NoticeCreate,
    session: PortalSession = Depends(require_route_access),
    fixtures: FixtureStore = Depends(get_fixture_store),
    overlays: OverlayStore = Depends(get_overlays),
):
    _check_properties(fixtures, data.property_ids)
    return announcements.create_notice(overlays, data)


@router.patch("/notices/{notice_id}", response_model=Notice)
def update_notice(
    notice_id: str,
    data: NoticeUpdate,
    session: PortalSession = Depends(require_route_access),
    fixtures: FixtureStore = Depends(get_fixture_store),
    overlays: OverlayStore = Depends(get_overlays),
):
    notice = queries.get_notice(fixtures, overlays, notice_id)
    if not notice:
        raise HTTPException(status_code=404, detail="Notice not found")
    try:
        announcements.update_notice(overlays, notice, data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return queries.get_notice(fixtures, overlays, notice_id)


@router.delete("/notices/{notice_id}")
def delete_notice(
    notice_id: str,
    session: PortalSession = Depends(require_route_access),
    fixtures: FixtureStore = Depends(get_fixture_store),
    overlays: OverlayStore = Depends(get_overlays),
):
    if not queries.get_notice(fixtures, overlays, notice_id):
        raise HTTPException(status_code=404, detail="Notice not found")
    announcements.delete_notice(overlays, notice_id)
    return {"status": "success", "message": f"Notice {notice_id} deleted."}


@router.get("/outages", response_model=list[Outage])
def list_outages(
    session: PortalSession = Depends(require_route_access),
    fixtures: FixtureStore = Depends(get_fixture_store),
    overlays: OverlayStore = Depends(get_overlays),
):
    """All properties, newest start first."""
    return queries.get_outages(fixtures, overlays)


@router.post("/outages", response_model=list[Outage], status_code=201)
def create_outages(
    data: OutageCreate,
    session: PortalSession = Depends(require_route_access),
    fixtures: FixtureStore = Depends(get_fixture_store),
    overlays: OverlayStore = Depends(get_overlays),
):
    _check_properties(fixtures, data.property_ids)
    return announcements.create_outage(overlays, data)


@router.patch("/outages/{outage_id}", response_model=Outage)
def update_outage(
    outage_id: str,
    data: OutageUpdate,
    session: PortalSession = Depends(require_route_access),
    fixtures: FixtureStore = Depends(get_fixture_store),
    overlays: OverlayStore = Depends(get_overlays),
):
    outage = queries.get_outage(fixtures, overlays, outage_id)
    if not outage:
        raise HTTPException(status_code=404, detail="Outage not found")
    try:
        announcements.update_outage(overlays, outage, data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return queries.get_outage(fixtures, overlays, outage_id)


@router.delete("/outages/{outage_id}")
def delete_outage(
    outage_id: str,
    session: PortalSession = Depends(require_route_access),
    fixtures: FixtureStore = Depends(get_fixture_store),
    overlays: OverlayStore = Depends(get_overlays),
):
    if not queries.get_outage(fixtures, overlays, outage_id):
        raise HTTPException(status_code=404, detail="Outage not found")
    announcements.delete_outage(overlays, outage_id)
    return {"status": "success", "message": f"Outage {outage_id} deleted."}
