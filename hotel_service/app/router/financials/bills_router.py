from uuid import UUID
from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_staff, validate_current_token
from shared.core.database import get_hotel_db as get_db
from shared.core.schemas import UserToken
from ...crud.financials import bills_crud as crud
from ...crud.system.dispatcher import NotificationPreferences, get_notification_preferences
from ...schemas.financials.bills_schemas import (
    BillCreate, BillListResponse, BillOut, BillRequest, BillServiceIn, BillUpdate, PaymentUpdate
)

router = APIRouter(prefix="/api/bills", tags=["Billing"])


@router.get("/all", response_model=BillListResponse)
def get_bills_endpoint(
    params: BillRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_bills(db, current_user, params)


@router.get("/reservation/{reservation_id}", response_model=BillOut)
def get_bill_by_reservation_endpoint(
    reservation_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_bill_by_reservation(db, current_user, reservation_id)


@router.get("/{bill_id}", response_model=BillOut)
def get_bill_endpoint(
    bill_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_bill(db, current_user, bill_id)


@router.post("/", response_model=BillOut)
def create_bill_route(
    bill: BillCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_staff)
):
    return crud.create_bill(db, bill)


@router.put("/", response_model=BillOut)
def update_bill_route(
    bill_update: BillUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_staff)
):
    return crud.update_bill(db, bill_update)


@router.post("/{bill_id}/services", response_model=BillOut)
def add_service_route(
    bill_id: UUID,
    line: BillServiceIn,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_staff)
):
    return crud.add_service(db, bill_id, line)


@router.put("/{bill_id}/payment", response_model=BillOut)
def update_payment_route(
    bill_id: UUID,
    payment: PaymentUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_staff)
):
    return crud.update_payment(db, bill_id, payment)


@router.post("/{bill_id}/send")
def send_invoice_route(
    bill_id: UUID,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    preferences: NotificationPreferences = Depends(get_notification_preferences),
    current_user: UserToken = Depends(allow_staff)
):
    return crud.send_invoice(background_tasks, db, bill_id, preferences)
