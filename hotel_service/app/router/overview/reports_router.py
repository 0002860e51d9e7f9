from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_management, allow_staff
from shared.core.database import get_hotel_db as get_db
from shared.core.schemas import UserToken
from ...crud.overview import reports_crud as crud
from ...schemas.overview.reports_schemas import (
    DashboardOverview, OccupancyReport, ReportRequest, ReservationReport, RevenueReport
)

router = APIRouter(prefix="/api/reports", tags=["Reports"])


@router.get("/dashboard", response_model=DashboardOverview)
def get_dashboard_endpoint(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_staff)
):
    return crud.get_dashboard(db)


@router.get("/occupancy", response_model=OccupancyReport)
def get_occupancy_report_endpoint(
    params: ReportRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_staff)
):
    return crud.get_occupancy_report(db, params)


@router.get("/revenue", response_model=RevenueReport)
def get_revenue_report_endpoint(
    params: ReportRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_management)
):
    return crud.get_revenue_report(db, params)


@router.get("/reservations", response_model=ReservationReport)
def get_reservation_report_endpoint(
    params: ReportRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_staff)
):
    return crud.get_reservation_report(db, params)
