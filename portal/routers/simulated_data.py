"""Admin reset of every locally staged change."""
from fastapi import APIRouter, Depends
from portal.dependencies import get_overlays, require_route_access
from portal.schemas.session import PortalSession
from portal.services.overlay import OverlayStore

router = APIRouter(prefix="/admin/simulated-data", tags=["admin"])


@router.post("/clear")
def clear_simulated_data(
    session: PortalSession = Depends(require_route_access),
    overlays: OverlayStore = Depends(get_overlays),
):
    """Drop all overlays; fixtures show through unchanged. The session is kept."""
    overlays.clear()
    return {"status": "success", "message": "Simulated data cleared."}
