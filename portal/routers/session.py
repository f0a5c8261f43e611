"""Simulated sign-in: read, switch and clear the acting role/user."""
from fastapi import APIRouter, Depends, HTTPException
from portal.dependencies import get_fixture_store, get_overlays, get_session_state
from portal.schemas.property import Cabin, Property
from portal.schemas.session import PortalSession
from portal.services import queries
from portal.services.fixtures import FixtureStore
from portal.services.overlay import OverlayStore
from portal.services.session import SessionState

router = APIRouter(prefix="/session", tags=["session"])


@router.get("", response_model=PortalSession | None)
def get_session(state: SessionState = Depends(get_session_state)):
    return state.get()


@router.put("", response_model=PortalSession)
def switch_session(
    data: PortalSession,
    state: SessionState = Depends(get_session_state),
    fixtures: FixtureStore = Depends(get_fixture_store),
    overlays: OverlayStore = Depends(get_overlays),
):
    """Replace the session wholesale (role switch). Non-Renter sessions carry no cabin."""
    user = queries.get_user(fixtures, overlays, data.user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if user.get("role") != data.role.value:
        raise HTTPException(status_code=400, detail=f"User {data.user_id} is not a {data.role.value}")
    if not queries.get_property(fixtures, data.property_id):
        raise HTTPException(status_code=404, detail="Property not found")
    return state.set(data)


@router.delete("")
def clear_session(state: SessionState = Depends(get_session_state)):
    state.clear()
    return {"status": "success", "message": "Session cleared."}


@router.get("/properties", response_model=list[Property])
def list_properties(fixtures: FixtureStore = Depends(get_fixture_store)):
    """Choices for the role switcher."""
    return queries.get_properties(fixtures)


@router.get("/properties/{property_id}/cabins", response_model=list[Cabin])
def list_property_cabins(property_id: str, fixtures: FixtureStore = Depends(get_fixture_store)):
    if not queries.get_property(fixtures, property_id):
        raise HTTPException(status_code=404, detail="Property not found")
    return queries.get_cabins_by_property(fixtures, property_id)
