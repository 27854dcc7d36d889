from uuid import UUID
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shiftbook.core.database import get_db
from shiftbook.models.profile import Profile
from shiftbook.routers.auth import get_current_principal
from shiftbook.schemas.profiles import ProfileOut, RoleAssign
from shiftbook.services import profiles as profile_service
from shiftbook.services.authorization import Principal, Role, resolve_role

router = APIRouter()


def _to_out(profile: Profile) -> ProfileOut:
    return ProfileOut(
        profile_id=profile.profile_id,
        email=profile.email,
        full_name=profile.full_name,
        role=resolve_role(profile.role).value,
    )


@router.get("/me", response_model=ProfileOut)
def get_current_user_info(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Get the current caller's profile and resolved role."""
    return _to_out(profile_service.get_profile(db, principal))


@router.get("", response_model=List[ProfileOut])
def list_profiles(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return [_to_out(p) for p in profile_service.list_profiles(db, principal)]


@router.put("/{profile_id}/role", response_model=ProfileOut)
def set_profile_role(
    profile_id: UUID,
    payload: RoleAssign,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Change someone's role (super admin only)."""
    return _to_out(profile_service.set_user_role(db, principal, profile_id, Role(payload.role)))
