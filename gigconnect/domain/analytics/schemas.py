"""Analytics domain schemas - Pydantic response models for dashboards"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class VendorStats(BaseModel):
    totalEarnings: float
    totalBookings: int
    avgRating: float
    thisMonthEarnings: float
    earningsTrend: float
    bookingsTrend: float


class MonthlyEarnings(BaseModel):
    month: str
    earnings: float


class RatingDistribution(BaseModel):
    stars: int
    count: int
    percentage: int


class VendorTransaction(BaseModel):
    id: int
    bookingId: int
    serviceTitle: str
    customerName: Optional[str] = None
    amount: float
    paymentStatus: str
    paymentDate: Optional[datetime] = None


class PendingPayout(BaseModel):
    pendingPayout: float


class MostBookedService(BaseModel):
    serviceId: int
    title: str
    bookingCount: int
    totalRevenue: float


class AdminStats(BaseModel):
    totalUsers: int
    totalVendors: int
    totalBookings: int
    totalRevenue: float
    usersTrend: float
    vendorsTrend: float
    bookingsTrend: float
    revenueTrend: float


class MonthlyGrowth(BaseModel):
    month: str
    users: int
    vendors: int


class MonthlyBookings(BaseModel):
    month: str
    bookings: int


class CustomerStats(BaseModel):
    totalBookings: int
    upcomingBookings: int
    completedBookings: int
    totalSpent: float
    bookingsTrend: float
    spentTrend: float
