import enum
import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from shiftbook.core.errors import ForbiddenError

logger = logging.getLogger(__name__)


class Role(str, enum.Enum):
    worker = "worker"
    admin = "admin"
    super_admin = "super_admin"


class Capability(str, enum.Enum):
    read_own = "read:own"
    write_own = "write:own"
    admin_shifts = "admin:shifts"
    admin_bookings = "admin:bookings"
    superadmin = "superadmin:*"


_WORKER = frozenset({Capability.read_own, Capability.write_own})
_ADMIN = _WORKER | {Capability.admin_shifts, Capability.admin_bookings}
_SUPER_ADMIN = _ADMIN | {Capability.superadmin}

GRANTS = {
    Role.worker: _WORKER,
    Role.admin: _ADMIN,
    Role.super_admin: _SUPER_ADMIN,
}


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, passed explicitly into every core operation."""

    user_id: UUID
    role: Role = Role.worker

    @property
    def is_admin(self) -> bool:
        return is_allowed(self.role, Capability.admin_bookings)


def resolve_role(raw: Optional[str]) -> Role:
    """Profiles may carry no role, or one we don't know: both mean worker."""
    if not raw:
        return Role.worker
    try:
        return Role(raw.strip().lower())
    except ValueError:
        logger.warning("[auth] unknown role %r treated as worker", raw)
        return Role.worker


def is_allowed(role: Role, capability: Capability) -> bool:
    return capability in GRANTS.get(role, _WORKER)


def require(principal: Principal, capability: Capability) -> None:
    if not is_allowed(principal.role, capability):
        logger.info(
            "[auth] denied %s for user_id=%s role=%s",
            capability.value,
            principal.user_id,
            principal.role.value,
        )
        raise ForbiddenError(f"This action requires {capability.value}")
