import logging
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shiftbook.core.database import store_guard
from shiftbook.core.errors import NotFoundError, ValidationError
from shiftbook.models.profile import Profile
from shiftbook.services.authorization import Capability, Principal, Role, require

logger = logging.getLogger(__name__)


def get_profile(db: Session, principal: Principal) -> Profile:
    with store_guard(db, "load profile"):
        profile = db.get(Profile, principal.user_id)
    if profile is None:
        raise NotFoundError("Profile not found")
    return profile


def list_profiles(db: Session, principal: Principal) -> List[Profile]:
    require(principal, Capability.admin_bookings)
    with store_guard(db, "list profiles"):
        return list(db.execute(select(Profile).order_by(Profile.email)).scalars().all())


def profiles_by_id(db: Session, ids: Iterable[UUID]) -> Dict[UUID, Profile]:
    ids = set(ids)
    if not ids:
        return {}
    with store_guard(db, "load profiles"):
        rows = db.execute(select(Profile).where(Profile.profile_id.in_(ids))).scalars().all()
    return {p.profile_id: p for p in rows}


def set_user_role(db: Session, principal: Principal, profile_id: UUID, role: Role) -> Profile:
    """Super admins only. A super admin can't change their own role."""
    require(principal, Capability.superadmin)
    if profile_id == principal.user_id:
        raise ValidationError("You cannot change your own role")

    with store_guard(db, "set user role"):
        profile = db.get(Profile, profile_id, with_for_update=True)
        if profile is None:
            raise NotFoundError("Profile not found")
        previous = profile.role
        profile.role = Role(role).value
        db.commit()
        db.refresh(profile)

    logger.info(
        "[profiles] role of %s changed %s -> %s by user_id=%s",
        profile_id,
        previous or Role.worker.value,
        profile.role,
        principal.user_id,
    )
    return profile


def _find_by_email(db: Session, email: str) -> Optional[Profile]:
    return db.execute(select(Profile).where(Profile.email == email)).scalar_one_or_none()


def _promote(db: Session, email: str, full_name: str) -> Profile:
    with store_guard(db, "create super admin"):
        profile = _find_by_email(db, email)
        if profile is None:
            profile = Profile(email=email, full_name=full_name)
            db.add(profile)
        profile.role = Role.super_admin.value
        db.commit()
        db.refresh(profile)
    return profile


def upsert_super_admin(db: Session, email: str, full_name: str) -> Profile:
    """Bootstrap helper for scripts: create or promote the first super admin."""
    email = email.strip().lower()
    try:
        profile = _promote(db, email, full_name)
    except IntegrityError:
        # another run inserted the same email between our lookup and commit
        logger.info("[profiles] %s was created concurrently, promoting it", email)
        profile = _promote(db, email, full_name)

    logger.info("[profiles] %s is now super_admin (%s)", email, profile.profile_id)
    return profile
