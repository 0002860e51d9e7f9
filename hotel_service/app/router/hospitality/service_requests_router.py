from uuid import UUID
from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_staff, validate_current_token
from shared.core.database import get_hotel_db as get_db
from shared.core.schemas import UserToken
from ...crud.hospitality import service_requests_crud as crud
from ...schemas.hospitality.service_requests_schemas import (
    ServiceRequestCreate, ServiceRequestListResponse, ServiceRequestOut,
    ServiceRequestOverview, ServiceRequestRequest, ServiceRequestUpdate
)

router = APIRouter(prefix="/api/service-requests", tags=["Service Requests"])


@router.get("/all", response_model=ServiceRequestListResponse)
def get_service_requests_endpoint(
    params: ServiceRequestRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_service_requests(db, current_user, params)


@router.get("/overview", response_model=ServiceRequestOverview)
def get_service_request_overview(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_staff)
):
    return crud.get_service_request_overview(db)


@router.get("/{request_id}", response_model=ServiceRequestOut)
def get_service_request_endpoint(
    request_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_service_request(db, current_user, request_id)


@router.post("/", response_model=ServiceRequestOut)
def create_service_request_route(
    request: ServiceRequestCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_service_request(background_tasks, db, current_user, request)


@router.put("/", response_model=ServiceRequestOut)
def update_service_request_route(
    request_update: ServiceRequestUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.update_service_request(background_tasks, db, current_user, request_update)
