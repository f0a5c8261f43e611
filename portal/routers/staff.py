"""Staff queue (unassigned at my property, assigned to me), ticket updates, knowledge base."""
from fastapi import APIRouter, Depends, HTTPException
from portal.dependencies import get_fixture_store, get_overlays, require_route_access
from portal.schemas.property import KBArticle
from portal.schemas.session import PortalSession
from portal.schemas.ticket import StaffTicketQueue, Ticket, TicketUpdate
from portal.services import queries
from portal.services.fixtures import FixtureStore
from portal.services.overlay import OverlayStore
from portal.services.tickets import update_ticket

router = APIRouter(prefix="/staff", tags=["staff"])


@router.get("/tickets", response_model=StaffTicketQueue)
def get_ticket_queue(
    session: PortalSession = Depends(require_route_access),
    fixtures: FixtureStore = Depends(get_fixture_store),
    overlays: OverlayStore = Depends(get_overlays),
):
    return StaffTicketQueue(
        unassigned=queries.get_unassigned_tickets(fixtures, overlays, session.property_id),
        assigned_to_me=queries.get_assigned_tickets(fixtures, overlays, session.user_id),
    )


@router.get("/tickets/{ticket_id}", response_model=Ticket)
def get_ticket(
    ticket_id: str,
    session: PortalSession = Depends(require_route_access),
    fixtures: FixtureStore = Depends(get_fixture_store),
    overlays: OverlayStore = Depends(get_overlays),
):
    ticket = queries.get_ticket(fixtures, overlays, ticket_id)
    if not ticket:
        raise HTTPException(status_code=404, detail="Ticket not found")
    return ticket


@router.patch("/tickets/{ticket_id}", response_model=Ticket)
def patch_ticket(
    ticket_id: str,
    data: TicketUpdate,
    session: PortalSession = Depends(require_route_access),
    fixtures: FixtureStore = Depends(get_fixture_store),
    overlays: OverlayStore = Depends(get_overlays),
):
    """Status and assignment changes. Any field may be overwritten; there are no transition rules."""
    ticket = queries.get_ticket(fixtures, overlays, ticket_id)
    if not ticket:
        raise HTTPException(status_code=404, detail="Ticket not found")
    try:
        update_ticket(overlays, ticket, data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return queries.get_ticket(fixtures, overlays, ticket_id)


@router.get("/kb", response_model=list[KBArticle])
def list_kb_articles(
    session: PortalSession = Depends(require_route_access),
    fixtures: FixtureStore = Depends(get_fixture_store),
):
    return queries.get_kb_articles_by_property(fixtures, session.property_id)


@router.get("/kb/{article_id}", response_model=KBArticle)
def get_kb_article(
    article_id: str,
    session: PortalSession = Depends(require_route_access),
    fixtures: FixtureStore = Depends(get_fixture_store),
):
    article = queries.get_kb_article(fixtures, article_id)
    if not article:
        raise HTTPException(status_code=404, detail="Article not found")
    return article
