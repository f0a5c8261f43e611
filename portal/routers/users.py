"""Admin user management: create (with signup link), revoke access, delete."""
from fastapi import APIRouter, Depends, HTTPException
from portal.dependencies import get_fixture_store, get_overlays, require_route_access
from portal.schemas.session import PortalSession
from portal.schemas.user import CreatedUserResponse, User, UserCreate, UserRole
from portal.services import queries, users
from portal.services.fixtures import FixtureStore
from portal.services.overlay import OverlayStore

router = APIRouter(prefix="/admin/users", tags=["admin"])


def _get_user_or_404(fixtures: FixtureStore, overlays: OverlayStore, user_id: str) -> dict:
    user = queries.get_user(fixtures, overlays, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("", response_model=list[User])
def list_users(
    role: UserRole | None = None,
    session: PortalSession = Depends(require_route_access),
    fixtures: FixtureStore = Depends(get_fixture_store),
    overlays: OverlayStore = Depends(get_overlays),
):
    if role:
        return queries.get_users_by_role(fixtures, overlays, role.value)
    return queries.get_users(fixtures, overlays)


@router.post("", response_model=CreatedUserResponse, status_code=201)
def create_user(
    data: UserCreate,
    session: PortalSession = Depends(require_route_access),
    fixtures: FixtureStore = Depends(get_fixture_store),
    overlays: OverlayStore = Depends(get_overlays),
):
    """Create a pending user. A held cabin answers 409 unless revoke_conflicting is set."""
    if not queries.get_property(fixtures, data.property_id):
        raise HTTPException(status_code=400, detail="Unknown property")
    if data.cabin_id:
        cabin = queries.get_cabin(fixtures, data.cabin_id)
        if not cabin or cabin.get("propertyId") != data.property_id:
            raise HTTPException(status_code=400, detail="Cabin does not belong to the selected property")
    user = users.create_user(overlays, fixtures.users(), data)
    return CreatedUserResponse(**user, signup_url=users.get_signup_url(user["signupToken"]))


@router.post("/{user_id}/revoke", response_model=User)
def revoke_user(
    user_id: str,
    session: PortalSession = Depends(require_route_access),
    fixtures: FixtureStore = Depends(get_fixture_store),
    overlays: OverlayStore = Depends(get_overlays),
):
    _get_user_or_404(fixtures, overlays, user_id)
    users.revoke_user_access(overlays, user_id)
    return queries.get_user(fixtures, overlays, user_id)


@router.delete("/{user_id}")
def delete_user(
    user_id: str,
    session: PortalSession = Depends(require_route_access),
    fixtures: FixtureStore = Depends(get_fixture_store),
    overlays: OverlayStore = Depends(get_overlays),
):
    _get_user_or_404(fixtures, overlays, user_id)
    if user_id == session.user_id:
        raise HTTPException(status_code=400, detail="Cannot delete the user you are acting as")
    users.delete_user(overlays, user_id)
    return {"status": "success", "message": f"User {user_id} deleted."}
