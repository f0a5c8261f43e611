"""Home screen: active notices and outages for the session property, plus my open tickets."""
from fastapi import APIRouter, Depends
from portal.dependencies import get_fixture_store, get_overlays, require_route_access
from portal.schemas.dashboard import DashboardView
from portal.schemas.session import PortalSession
from portal.schemas.user import UserRole
from portal.services import queries
from portal.services.fixtures import FixtureStore
from portal.services.overlay import OverlayStore

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardView)
def get_dashboard(
    session: PortalSession = Depends(require_route_access),
    fixtures: FixtureStore = Depends(get_fixture_store),
    overlays: OverlayStore = Depends(get_overlays),
):
    open_tickets = []
    if session.role == UserRole.renter:
        open_tickets = queries.get_my_open_tickets(fixtures, overlays, session.user_id)
    return DashboardView(
        session=session,
        notices=queries.get_active_notices(fixtures, overlays, session.property_id),
        outages=queries.get_active_outages(fixtures, overlays, session.property_id),
        open_tickets=open_tickets,
    )
