"""Analytics router - FastAPI endpoints for dashboard statistics"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...config import DEFAULT_TREND_MONTHS
from ...database import get_db
from .schemas import (
    AdminStats,
    CustomerStats,
    MonthlyBookings,
    MonthlyEarnings,
    MonthlyGrowth,
    MostBookedService,
    PendingPayout,
    RatingDistribution,
    VendorStats,
    VendorTransaction,
)
from .service import AnalyticsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analytics", tags=["Analytics"])


def get_analytics_service(db: Session = Depends(get_db)) -> AnalyticsService:
    """Dependency injection for AnalyticsService"""
    return AnalyticsService(db)


# ============================================================================
# VENDOR DASHBOARD
# ============================================================================


@router.get("/vendors/{vendor_id}/stats", response_model=VendorStats)
def get_vendor_stats(
    vendor_id: int,
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Earnings, bookings, rating and month-over-month trends for a vendor"""
    return service.vendor_stats(vendor_id)


@router.get("/vendors/{vendor_id}/monthly-earnings", response_model=list[MonthlyEarnings])
def get_vendor_monthly_earnings(
    vendor_id: int,
    months: int = Query(DEFAULT_TREND_MONTHS, ge=1, le=24),
    service: AnalyticsService = Depends(get_analytics_service),
):
    return service.vendor_monthly_earnings(vendor_id, months)


@router.get("/vendors/{vendor_id}/rating-distribution", response_model=list[RatingDistribution])
def get_vendor_rating_distribution(
    vendor_id: int,
    service: AnalyticsService = Depends(get_analytics_service),
):
    return service.vendor_rating_distribution(vendor_id)


@router.get("/vendors/{vendor_id}/transactions", response_model=list[VendorTransaction])
def get_vendor_transactions(
    vendor_id: int,
    limit: int = Query(20, ge=1, le=100),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Most recent payments for a vendor's bookings"""
    return service.vendor_transactions(vendor_id, limit)


@router.get("/vendors/{vendor_id}/pending-payout", response_model=PendingPayout)
def get_vendor_pending_payout(
    vendor_id: int,
    service: AnalyticsService = Depends(get_analytics_service),
):
    return PendingPayout(pendingPayout=service.vendor_pending_payout(vendor_id))


@router.get("/vendors/{vendor_id}/most-booked-services", response_model=list[MostBookedService])
def get_vendor_most_booked_services(
    vendor_id: int,
    limit: int = Query(5, ge=1, le=50),
    service: AnalyticsService = Depends(get_analytics_service),
):
    return service.vendor_most_booked_services(vendor_id, limit)


# ============================================================================
# ADMIN DASHBOARD
# ============================================================================


@router.get("/admin/stats", response_model=AdminStats)
def get_admin_stats(service: AnalyticsService = Depends(get_analytics_service)):
    """Platform-wide totals and month-over-month trends"""
    return service.admin_stats()


@router.get("/admin/user-growth", response_model=list[MonthlyGrowth])
def get_admin_user_growth(
    months: int = Query(DEFAULT_TREND_MONTHS, ge=1, le=24),
    service: AnalyticsService = Depends(get_analytics_service),
):
    return service.admin_user_growth(months)


@router.get("/admin/bookings-trend", response_model=list[MonthlyBookings])
def get_admin_bookings_trend(
    months: int = Query(DEFAULT_TREND_MONTHS, ge=1, le=24),
    service: AnalyticsService = Depends(get_analytics_service),
):
    return service.admin_bookings_trend(months)


# ============================================================================
# CUSTOMER DASHBOARD
# ============================================================================


@router.get("/customers/{customer_id}/stats", response_model=CustomerStats)
def get_customer_stats(
    customer_id: int,
    service: AnalyticsService = Depends(get_analytics_service),
):
    return service.customer_stats(customer_id)
