import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from fastapi import BackgroundTasks
from sqlalchemy import case, func
from sqlalchemy.orm import Session

from shared.core.exceptions import AuthorizationError, InvalidTransitionError, NotFoundError
from shared.core.schemas import UserToken
from shared.utils.enums import MANAGEMENT_ROLES
from ...enum.hotel_enum import ReservationStatus, ServiceRequestStatus
from ...models.hospitality.reservations import Reservation
from ...models.hospitality.service_requests import ServiceRequest
from ...schemas.hospitality.service_requests_schemas import (
    ServiceRequestCreate, ServiceRequestListResponse, ServiceRequestOut,
    ServiceRequestOverview, ServiceRequestRequest, ServiceRequestUpdate
)
from ..system.dispatcher import Dispatcher

logger = logging.getLogger(__name__)

CLOSED_STATUSES = (
    ServiceRequestStatus.completed.value,
    ServiceRequestStatus.cancelled.value,
)


def get_service_request_by_id(db: Session, request_id: UUID) -> ServiceRequest:
    service_request = db.query(ServiceRequest).filter(
        ServiceRequest.id == request_id).first()
    if not service_request:
        raise NotFoundError("Service request not found")
    return service_request


def _current_stay(db: Session, guest_id: UUID) -> Optional[Reservation]:
    """The guest's checked-in reservation, else their next confirmed one."""
    for status in (ReservationStatus.checked_in.value, ReservationStatus.confirmed.value):
        reservation = db.query(Reservation).filter(
            Reservation.guest_id == guest_id,
            Reservation.status == status,
        ).order_by(Reservation.check_in.asc()).first()
        if reservation:
            return reservation
    return None


def create_service_request(
        background_tasks: BackgroundTasks,
        db: Session,
        current_user: UserToken,
        request: ServiceRequestCreate) -> ServiceRequestOut:
    guest_id = UUID(current_user.user_id)
    data = request.model_dump()

    if request.reservation_id:
        reservation = db.query(Reservation).filter(
            Reservation.id == request.reservation_id).first()
        if not reservation:
            raise NotFoundError("Reservation not found")
        if current_user.is_guest and reservation.guest_id != guest_id:
            raise AuthorizationError("Not authorized to use this reservation")
        guest_id = reservation.guest_id
    else:
        reservation = _current_stay(db, guest_id) if current_user.is_guest else None
        if reservation:
            data["reservation_id"] = reservation.id

    if not data.get("room_id") and reservation:
        data["room_id"] = reservation.room_id

    service_request = ServiceRequest(guest_id=guest_id, **data)
    db.add(service_request)
    db.commit()
    db.refresh(service_request)

    logger.info("Service request %s (%s) created", service_request.id, service_request.service_type)
    Dispatcher(background_tasks).service_request_created(service_request)
    return ServiceRequestOut.model_validate(service_request)


def get_service_requests(db: Session, current_user: UserToken, params: ServiceRequestRequest) -> ServiceRequestListResponse:
    filters = []
    if current_user.is_guest:
        filters.append(ServiceRequest.guest_id == UUID(current_user.user_id))
    if params.status:
        filters.append(ServiceRequest.status == params.status)
    if params.service_type:
        filters.append(ServiceRequest.service_type == params.service_type)
    if params.priority:
        filters.append(ServiceRequest.priority == params.priority)
    if params.search:
        filters.append(ServiceRequest.description.ilike(f"%{params.search}%"))

    base_query = db.query(ServiceRequest).filter(*filters)
    total = base_query.with_entities(func.count(ServiceRequest.id)).scalar()

    query = base_query.order_by(ServiceRequest.created_at.desc()).offset(params.skip)
    if params.limit:
        query = query.limit(params.limit)

    return ServiceRequestListResponse(
        requests=[ServiceRequestOut.model_validate(r) for r in query.all()],
        total=total,
    )


def get_service_request(db: Session, current_user: UserToken, request_id: UUID) -> ServiceRequestOut:
    service_request = get_service_request_by_id(db, request_id)
    if current_user.is_guest and service_request.guest_id != UUID(current_user.user_id):
        raise AuthorizationError("Not authorized to view this service request")
    return ServiceRequestOut.model_validate(service_request)


def update_service_request(
        background_tasks: BackgroundTasks,
        db: Session,
        current_user: UserToken,
        request_update: ServiceRequestUpdate) -> ServiceRequestOut:
    service_request = get_service_request_by_id(db, request_update.id)
    update_data = request_update.model_dump(exclude_unset=True, exclude={"id"})

    if current_user.is_guest:
        if service_request.guest_id != UUID(current_user.user_id):
            raise AuthorizationError("Not authorized to modify this service request")
        if set(update_data) - {"status"} or update_data.get("status") != ServiceRequestStatus.cancelled.value:
            raise AuthorizationError("Guests can only cancel their service requests")
    elif current_user.role not in MANAGEMENT_ROLES and (
            "assigned_to" in update_data or "cost" in update_data):
        raise AuthorizationError("Only managers can assign requests or set costs")

    new_status = update_data.get("status")
    if new_status and new_status != service_request.status:
        if service_request.status in CLOSED_STATUSES:
            raise InvalidTransitionError("service request", service_request.status, new_status)
        if new_status == ServiceRequestStatus.completed.value:
            service_request.completed_at = datetime.now(timezone.utc)

    status_changed = bool(new_status) and new_status != service_request.status
    for key, value in update_data.items():
        setattr(service_request, key, value)

    db.commit()
    db.refresh(service_request)

    if status_changed:
        Dispatcher(background_tasks).service_request_updated(service_request)
    return ServiceRequestOut.model_validate(service_request)


def get_service_request_overview(db: Session) -> ServiceRequestOverview:
    counts = db.query(
        func.count(ServiceRequest.id).label("total"),
        *[
            func.count(case((ServiceRequest.status == status.value, 1))).label(status.name)
            for status in ServiceRequestStatus
        ]
    ).one()
    return ServiceRequestOverview(
        total=counts.total or 0,
        byStatus={status.value: getattr(counts, status.name) or 0
                  for status in ServiceRequestStatus},
    )
