"""Simulated session: who is acting, in which role, at which property/cabin."""
from portal.schemas.base import PortalModel
from portal.schemas.user import UserRole


class PortalSession(PortalModel):
    role: UserRole
    user_id: str
    property_id: str
    cabin_id: str | None = None
