"""Community board for the session property. Lock, pin and delete are Admin-only."""
from fastapi import APIRouter, Depends, HTTPException
from portal.dependencies import (
    get_fixture_store,
    get_overlays,
    get_session_state,
    require_admin,
    require_route_access,
)
from portal.schemas.community import (
    Reply,
    ReplyCreate,
    Thread,
    ThreadCreate,
    ThreadDetail,
    ThreadLockRequest,
    ThreadPinRequest,
)
from portal.schemas.session import PortalSession
from portal.services import community, queries
from portal.services.fixtures import FixtureStore
from portal.services.overlay import OverlayStore
from portal.services.session import SessionState

router = APIRouter(prefix="/community", tags=["community"])


def _get_thread_or_404(fixtures: FixtureStore, overlays: OverlayStore, thread_id: str) -> dict:
    thread = queries.get_thread(fixtures, overlays, thread_id)
    if not thread:
        raise HTTPException(status_code=404, detail="Thread not found")
    return thread


@router.get("/threads", response_model=list[Thread])
def list_threads(
    session: PortalSession = Depends(require_route_access),
    fixtures: FixtureStore = Depends(get_fixture_store),
    overlays: OverlayStore = Depends(get_overlays),
):
    """Pinned threads first, then most recently updated."""
    return queries.get_threads(fixtures, overlays, session.property_id)


@router.post("/threads", response_model=Thread, status_code=201)
def create_thread(
    data: ThreadCreate,
    session: PortalSession = Depends(require_route_access),
    state: SessionState = Depends(get_session_state),
    overlays: OverlayStore = Depends(get_overlays),
):
    return community.create_thread(overlays, state, data)


@router.get("/threads/{thread_id}", response_model=ThreadDetail)
def get_thread(
    thread_id: str,
    session: PortalSession = Depends(require_route_access),
    fixtures: FixtureStore = Depends(get_fixture_store),
    overlays: OverlayStore = Depends(get_overlays),
):
    thread = _get_thread_or_404(fixtures, overlays, thread_id)
    return ThreadDetail(thread=thread, replies=queries.get_thread_replies(fixtures, overlays, thread_id))


@router.get("/threads/{thread_id}/replies", response_model=list[Reply])
def list_replies(
    thread_id: str,
    session: PortalSession = Depends(require_route_access),
    fixtures: FixtureStore = Depends(get_fixture_store),
    overlays: OverlayStore = Depends(get_overlays),
):
    _get_thread_or_404(fixtures, overlays, thread_id)
    return queries.get_thread_replies(fixtures, overlays, thread_id)


@router.post("/threads/{thread_id}/replies", response_model=Reply, status_code=201)
def create_reply(
    thread_id: str,
    data: ReplyCreate,
    session: PortalSession = Depends(require_route_access),
    state: SessionState = Depends(get_session_state),
    fixtures: FixtureStore = Depends(get_fixture_store),
    overlays: OverlayStore = Depends(get_overlays),
):
    thread = _get_thread_or_404(fixtures, overlays, thread_id)
    return community.create_reply(overlays, state, thread, data)


@router.patch("/threads/{thread_id}/lock", response_model=Thread)
def lock_thread(
    thread_id: str,
    data: ThreadLockRequest,
    session: PortalSession = Depends(require_admin),
    fixtures: FixtureStore = Depends(get_fixture_store),
    overlays: OverlayStore = Depends(get_overlays),
):
    _get_thread_or_404(fixtures, overlays, thread_id)
    community.lock_thread(overlays, thread_id, data.is_locked)
    return queries.get_thread(fixtures, overlays, thread_id)


@router.patch("/threads/{thread_id}/pin", response_model=Thread)
def pin_thread(
    thread_id: str,
    data: ThreadPinRequest,
    session: PortalSession = Depends(require_admin),
    fixtures: FixtureStore = Depends(get_fixture_store),
    overlays: OverlayStore = Depends(get_overlays),
):
    _get_thread_or_404(fixtures, overlays, thread_id)
    community.pin_thread(overlays, thread_id, data.is_pinned)
    return queries.get_thread(fixtures, overlays, thread_id)


@router.delete("/threads/{thread_id}")
def delete_thread(
    thread_id: str,
    session: PortalSession = Depends(require_admin),
    fixtures: FixtureStore = Depends(get_fixture_store),
    overlays: OverlayStore = Depends(get_overlays),
):
    """Hide the thread. Its replies are left in place."""
    _get_thread_or_404(fixtures, overlays, thread_id)
    community.delete_thread(overlays, thread_id)
    return {"status": "success", "message": f"Thread {thread_id} deleted."}
