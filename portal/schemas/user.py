"""User administration schemas."""
import enum

from pydantic import EmailStr, field_validator, model_validator

from portal.schemas.base import PortalModel, strip_required


class UserRole(str, enum.Enum):
    renter = "Renter"
    staff = "Staff"
    admin = "Admin"


class User(PortalModel):
    id: str
    email: str
    name: str
    role: UserRole
    property_ids: list[str] = []
    cabin_id: str | None = None
    signup_token: str | None = None  # uuid in the signup URL
    is_active: bool | None = None  # missing means active (fixture users)


class UserCreate(PortalModel):
    email: EmailStr
    name: str
    role: UserRole = UserRole.renter
    property_id: str
    cabin_id: str | None = None  # required for Renter, dropped for Staff/Admin
    revoke_conflicting: bool = False  # revoke the current cabin holder instead of failing

    @field_validator("name", "property_id")
    @classmethod
    def required_text(cls, v: str) -> str:
        return strip_required(v)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()

    @model_validator(mode="after")
    def cabin_for_renters_only(self):
        if self.role != UserRole.renter:
            self.cabin_id = None
        elif not (self.cabin_id or "").strip():
            raise ValueError("cabin_id is required for Renter users")
        return self


class CreatedUserResponse(User):
    signup_url: str | None = None


class CabinConflictResponse(PortalModel):
    detail: str
    cabin_id: str
    conflicting_user: User
