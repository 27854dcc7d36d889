from uuid import UUID
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from shiftbook.core.database import get_db
from shiftbook.routers.auth import get_current_principal
from shiftbook.schemas.shifts import (
    ShiftTemplateActive,
    ShiftTemplateCreate,
    ShiftTemplateOut,
    ShiftTemplateUpdate,
)
from shiftbook.services import shift_catalog
from shiftbook.services.authorization import Principal

router = APIRouter()


@router.get("", response_model=List[ShiftTemplateOut])
def list_shift_templates(
    active_only: bool = Query(True, description="False returns the admin management view"),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Active templates by start time, or (admins) every template newest first."""
    return shift_catalog.list_templates(db, principal, active_only=active_only)


@router.get("/{shift_template_id}", response_model=ShiftTemplateOut)
def get_shift_template(
    shift_template_id: UUID,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return shift_catalog.get_template(db, principal, shift_template_id)


@router.post("", response_model=ShiftTemplateOut, status_code=status.HTTP_201_CREATED)
def create_shift_template(
    payload: ShiftTemplateCreate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Create a template (admin). duration_hours is computed from the times."""
    return shift_catalog.create_template(
        db,
        principal,
        name=payload.name,
        start_time=payload.start_time,
        end_time=payload.end_time,
        shift_type=payload.shift_type,
    )


@router.patch("/{shift_template_id}", response_model=ShiftTemplateOut)
def update_shift_template(
    shift_template_id: UUID,
    payload: ShiftTemplateUpdate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return shift_catalog.update_template(
        db, principal, shift_template_id, payload.model_dump(exclude_unset=True)
    )


@router.put("/{shift_template_id}/active", response_model=ShiftTemplateOut)
def set_template_active(
    shift_template_id: UUID,
    payload: ShiftTemplateActive,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return shift_catalog.set_active(db, principal, shift_template_id, payload.is_active)


@router.delete("/{shift_template_id}")
def delete_shift_template(
    shift_template_id: UUID,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Delete a template together with all of its bookings. Cannot be undone."""
    removed = shift_catalog.delete_template(db, principal, shift_template_id)
    return {"deleted": True, "shift_template_id": str(shift_template_id), "bookings_removed": removed}
