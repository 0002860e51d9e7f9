from datetime import date
from typing import Dict, List, Optional
from pydantic import BaseModel


class ReportRequest(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class DailyOccupancy(BaseModel):
    day: date
    occupied_rooms: int
    occupancy_rate: float


class OccupancyReport(BaseModel):
    totalRooms: int
    byStatus: Dict[str, int]
    currentOccupancyRate: float
    averageOccupancyRate: float
    daily: List[DailyOccupancy]


class DailyRevenue(BaseModel):
    day: date
    revenue: float
    bills: int


class RevenueReport(BaseModel):
    totalRevenue: float
    pendingAmount: float
    taxesCollected: float
    paidBills: int
    daily: List[DailyRevenue]


class ReservationReport(BaseModel):
    totalReservations: int
    byStatus: Dict[str, int]
    bySource: Dict[str, int]


class DashboardOverview(BaseModel):
    totalRooms: int
    occupancyRate: float
    todayArrivals: int
    todayDepartures: int
    revenueThisMonth: float
    revenueLastMonth: float
    pendingServiceRequests: int
    averageRating: float
