"""Renter maintenance: open tickets and follow my own."""
from fastapi import APIRouter, Depends, HTTPException
from portal.dependencies import get_fixture_store, get_overlays, get_session_state, require_route_access
from portal.schemas.session import PortalSession
from portal.schemas.ticket import MAINTENANCE_CATEGORIES, Ticket, TicketCreate
from portal.services import queries
from portal.services.fixtures import FixtureStore
from portal.services.overlay import OverlayStore
from portal.services.session import SessionState
from portal.services.tickets import create_ticket

router = APIRouter(prefix="/maintenance", tags=["maintenance"])


@router.get("/categories")
def list_categories(session: PortalSession = Depends(require_route_access)):
    return MAINTENANCE_CATEGORIES


@router.get("/tickets", response_model=list[Ticket])
def list_my_tickets(
    session: PortalSession = Depends(require_route_access),
    fixtures: FixtureStore = Depends(get_fixture_store),
    overlays: OverlayStore = Depends(get_overlays),
):
    return queries.get_my_tickets(fixtures, overlays, session.user_id)


@router.post("/tickets", response_model=Ticket, status_code=201)
def open_ticket(
    data: TicketCreate,
    session: PortalSession = Depends(require_route_access),
    state: SessionState = Depends(get_session_state),
    overlays: OverlayStore = Depends(get_overlays),
):
    try:
        return create_ticket(overlays, state, data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/tickets/{ticket_id}", response_model=Ticket)
def get_my_ticket(
    ticket_id: str,
    session: PortalSession = Depends(require_route_access),
    fixtures: FixtureStore = Depends(get_fixture_store),
    overlays: OverlayStore = Depends(get_overlays),
):
    ticket = queries.get_ticket(fixtures, overlays, ticket_id)
    if not ticket:
        raise HTTPException(status_code=404, detail="Ticket not found")
    if ticket.get("createdByUserId") != session.user_id:
        raise HTTPException(status_code=403, detail="Not your ticket")
    return ticket
