from uuid import uuid4

import pytest

from shiftbook.core.errors import ForbiddenError
from shiftbook.services.authorization import (
    Capability,
    Principal,
    Role,
    is_allowed,
    require,
    resolve_role,
)


@pytest.mark.parametrize("role, capability, allowed", [
    (Role.worker, Capability.read_own, True),
    (Role.worker, Capability.write_own, True),
    (Role.worker, Capability.admin_shifts, False),
    (Role.worker, Capability.admin_bookings, False),
    (Role.worker, Capability.superadmin, False),
    (Role.admin, Capability.admin_shifts, True),
    (Role.admin, Capability.admin_bookings, True),
    (Role.admin, Capability.superadmin, False),
    (Role.super_admin, Capability.admin_shifts, True),
    (Role.super_admin, Capability.admin_bookings, True),
    (Role.super_admin, Capability.superadmin, True),
])
def test_capability_grants(role, capability, allowed):
    assert is_allowed(role, capability) is allowed


def test_admin_capabilities_are_a_subset_of_super_admin():
    admin = {c for c in Capability if is_allowed(Role.admin, c)}
    super_admin = {c for c in Capability if is_allowed(Role.super_admin, c)}
    assert admin < super_admin


@pytest.mark.parametrize("raw, expected", [
    (None, Role.worker),
    ("", Role.worker),
    ("worker", Role.worker),
    ("admin", Role.admin),
    (" Super_Admin ", Role.super_admin),
    ("owner", Role.worker),
])
def test_resolve_role(raw, expected):
    assert resolve_role(raw) is expected


def test_require_raises_forbidden_for_denied_capability():
    with pytest.raises(ForbiddenError) as exc:
        require(Principal(uuid4(), Role.worker), Capability.admin_shifts)
    assert exc.value.code == "access_denied"
    assert exc.value.status_code == 403


def test_require_passes_silently_when_allowed():
    assert require(Principal(uuid4(), Role.admin), Capability.admin_bookings) is None


def test_principal_defaults_to_worker():
    p = Principal(uuid4())
    assert p.role is Role.worker
    assert not p.is_admin
