"""Home screen widgets."""
from portal.schemas.base import PortalModel
from portal.schemas.notice import Notice, Outage
from portal.schemas.session import PortalSession
from portal.schemas.ticket import Ticket


class DashboardView(PortalModel):
    session: PortalSession
    notices: list[Notice]  # active at the session property
    outages: list[Outage]  # active at the session property
    open_tickets: list[Ticket]  # Renter only; empty for Staff/Admin
