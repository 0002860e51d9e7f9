from collections import defaultdict
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple

from dateutil.relativedelta import relativedelta
from sqlalchemy import func
from sqlalchemy.orm import Session

from shared.core.exceptions import InvalidDateRange, ValidationError
from ...enum.hotel_enum import (
    BookingSource, FeedbackStatus, PaymentStatus, ReservationStatus, RoomStatus, ServiceRequestStatus
)
from ...models.financials.bills import Bill
from ...models.hospitality.feedback import Feedback
from ...models.hospitality.reservations import Reservation
from ...models.hospitality.service_requests import ServiceRequest
from ...schemas.overview.reports_schemas import (
    DailyOccupancy, DailyRevenue, DashboardOverview, OccupancyReport,
    ReportRequest, ReservationReport, RevenueReport
)
from ..hospitality.rooms_crud import get_room_overview

DEFAULT_REPORT_DAYS = 7
MAX_REPORT_DAYS = 366

# Reservations that had a guest in the room on their nights
STAYED_STATUSES = (
    ReservationStatus.confirmed.value,
    ReservationStatus.checked_in.value,
    ReservationStatus.checked_out.value,
)


def resolve_range(params: ReportRequest, today: Optional[date] = None) -> Tuple[date, date]:
    """Inclusive [start, end]; defaults to the last seven days."""
    today = today or date.today()
    end = params.end_date or today
    start = params.start_date or end - timedelta(days=DEFAULT_REPORT_DAYS - 1)
    if end < start:
        raise InvalidDateRange("End date must not be before start date")
    if (end - start).days + 1 > MAX_REPORT_DAYS:
        raise ValidationError(f"Report range cannot exceed {MAX_REPORT_DAYS} days")
    return start, end


def _days(start: date, end: date):
    for offset in range((end - start).days + 1):
        yield start + timedelta(days=offset)


def _day_bounds(start: date, end: date) -> Tuple[datetime, datetime]:
    return (datetime.combine(start, time.min, tzinfo=timezone.utc),
            datetime.combine(end + timedelta(days=1), time.min, tzinfo=timezone.utc))


def _rate(part: int, whole: int) -> float:
    return round(part * 100 / whole, 2) if whole else 0.0


def get_occupancy_report(db: Session, params: ReportRequest) -> OccupancyReport:
    start, end = resolve_range(params)
    overview = get_room_overview(db)
    total_rooms = overview.totalRooms

    stays = db.query(Reservation.check_in, Reservation.check_out).filter(
        Reservation.status.in_(STAYED_STATUSES),
        Reservation.check_in <= end,
        Reservation.check_out > start,
    ).all()

    daily = []
    for day in _days(start, end):
        occupied = sum(1 for stay in stays if stay.check_in <= day < stay.check_out)
        daily.append(DailyOccupancy(
            day=day, occupied_rooms=occupied, occupancy_rate=_rate(occupied, total_rooms)))

    average = round(sum(d.occupancy_rate for d in daily) / len(daily), 2) if daily else 0.0
    return OccupancyReport(
        totalRooms=total_rooms,
        byStatus=overview.byStatus,
        currentOccupancyRate=_rate(overview.byStatus.get(RoomStatus.occupied.value, 0), total_rooms),
        averageOccupancyRate=average,
        daily=daily,
    )


def get_revenue_report(db: Session, params: ReportRequest) -> RevenueReport:
    start, end = resolve_range(params)
    range_start, range_end = _day_bounds(start, end)

    paid_bills = db.query(Bill).filter(
        Bill.payment_status == PaymentStatus.paid.value,
        Bill.paid_at >= range_start,
        Bill.paid_at < range_end,
    ).all()

    per_day = defaultdict(lambda: [0.0, 0])
    for bill in paid_bills:
        bucket = per_day[bill.paid_at.date()]
        bucket[0] += float(bill.total_amount)
        bucket[1] += 1

    pending_amount = db.query(func.coalesce(func.sum(Bill.total_amount), 0)).filter(
        Bill.payment_status.in_([PaymentStatus.pending.value, PaymentStatus.partial.value]),
    ).scalar()

    return RevenueReport(
        totalRevenue=round(sum(float(b.total_amount) for b in paid_bills), 2),
        pendingAmount=round(float(pending_amount or 0), 2),
        taxesCollected=round(sum(float(b.taxes) for b in paid_bills), 2),
        paidBills=len(paid_bills),
        daily=[
            DailyRevenue(day=day, revenue=round(per_day[day][0], 2), bills=per_day[day][1])
            for day in _days(start, end)
        ],
    )


def get_reservation_report(db: Session, params: ReportRequest) -> ReservationReport:
    start, end = resolve_range(params)
    in_range = [Reservation.check_in >= start, Reservation.check_in <= end]

    by_status = {status.value: 0 for status in ReservationStatus}
    by_status.update(dict(
        db.query(Reservation.status, func.count(Reservation.id))
        .filter(*in_range).group_by(Reservation.status).all()
    ))
    by_source = {source.value: 0 for source in BookingSource}
    by_source.update(dict(
        db.query(Reservation.booking_source, func.count(Reservation.id))
        .filter(*in_range).group_by(Reservation.booking_source).all()
    ))

    return ReservationReport(
        totalReservations=sum(by_status.values()),
        byStatus=by_status,
        bySource=by_source,
    )


def _paid_between(db: Session, start: date, end: date) -> float:
    range_start, range_end = _day_bounds(start, end)
    total = db.query(func.coalesce(func.sum(Bill.total_amount), 0)).filter(
        Bill.payment_status == PaymentStatus.paid.value,
        Bill.paid_at >= range_start,
        Bill.paid_at < range_end,
    ).scalar()
    return round(float(total or 0), 2)


def get_dashboard(db: Session, today: Optional[date] = None) -> DashboardOverview:
    today = today or date.today()
    overview = get_room_overview(db)

    arrivals = db.query(func.count(Reservation.id)).filter(
        Reservation.check_in == today,
        Reservation.status.in_([ReservationStatus.confirmed.value, ReservationStatus.checked_in.value]),
    ).scalar()
    departures = db.query(func.count(Reservation.id)).filter(
        Reservation.check_out == today,
        Reservation.status.in_([ReservationStatus.checked_in.value, ReservationStatus.checked_out.value]),
    ).scalar()

    current_month_start = today + relativedelta(day=1)
    revenue = _paid_between(db, current_month_start, today)
    last_month_revenue = _paid_between(
        db, current_month_start - relativedelta(months=1), current_month_start - timedelta(days=1))

    pending_requests = db.query(func.count(ServiceRequest.id)).filter(
        ServiceRequest.status == ServiceRequestStatus.pending.value).scalar()
    average_rating = db.query(func.avg(Feedback.rating)).filter(
        Feedback.status == FeedbackStatus.approved.value).scalar()

    return DashboardOverview(
        totalRooms=overview.totalRooms,
        occupancyRate=_rate(overview.byStatus.get(RoomStatus.occupied.value, 0), overview.totalRooms),
        todayArrivals=arrivals or 0,
        todayDepartures=departures or 0,
        revenueThisMonth=revenue,
        revenueLastMonth=last_month_revenue,
        pendingServiceRequests=pending_requests or 0,
        averageRating=round(float(average_rating or 0), 2),
    )
