from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import allow_admin, allow_staff, validate_current_token
from shared.core.database import get_hotel_db as get_db
from shared.core.schemas import UserToken
from ...crud.system import system_settings_crud as crud
from ...schemas.system.system_settings_schemas import SystemSettingsOut, SystemSettingsUpdate, TaxBreakdown

router = APIRouter(prefix="/api/settings", tags=["System Settings"])


@router.get("/", response_model=SystemSettingsOut)
def get_settings_endpoint(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_system_settings(db)


@router.put("/", response_model=SystemSettingsOut)
def update_settings_route(
    update_data: SystemSettingsUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    return crud.update_system_settings(db, update_data)


@router.get("/tax-estimate", response_model=TaxBreakdown)
def tax_estimate_endpoint(
    amount: float = Query(..., ge=0),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_staff)
):
    return crud.suggested_taxes(db, amount)
