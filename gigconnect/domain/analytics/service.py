"""Analytics service - Dashboard statistics for vendors, admins and customers

Totals and month-over-month trends are computed from calendar months: "this
month" is the month containing ``today`` and "last month" the one before it,
so figures jump at month boundaries rather than sliding.

No errors are handled here. A failing query propagates to the caller.
"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...models import REVENUE_BOOKING_STATUSES
from ...shared.formatting import calculate_trend, whole_percentages
from ...shared.periods import month_bounds, month_label, trailing_months
from .repository import AnalyticsRepository
from .schemas import (
    AdminStats,
    CustomerStats,
    MonthlyBookings,
    MonthlyEarnings,
    MonthlyGrowth,
    MostBookedService,
    RatingDistribution,
    VendorStats,
    VendorTransaction,
)

logger = logging.getLogger(__name__)

STAR_RATINGS = (5, 4, 3, 2, 1)


class AnalyticsService:
    """Service layer for dashboard analytics"""

    def __init__(self, db: Session, today: Optional[date] = None):
        self.db = db
        self.repo = AnalyticsRepository()
        self.today = today or date.today()

    def _window(self, months: int):
        """Month starts of the trailing window plus its [start, end) datetime range"""
        month_starts = trailing_months(self.today, months)
        start, _ = month_bounds(month_starts[0])
        _, end = month_bounds(self.today)
        return month_starts, start, end

    # ------------------------------------------------------------------
    # Vendor
    # ------------------------------------------------------------------

    def vendor_stats(self, vendor_id: int) -> VendorStats:
        this_start, this_end = month_bounds(self.today)
        last_start, last_end = month_bounds(self.today, -1)

        total_earnings = self.repo.sum_vendor_earnings(self.db, vendor_id)
        total_bookings = self.repo.count_vendor_bookings(
            self.db, vendor_id, statuses=REVENUE_BOOKING_STATUSES
        )

        this_month_earnings = self.repo.sum_vendor_earnings(self.db, vendor_id, this_start, this_end)
        last_month_earnings = self.repo.sum_vendor_earnings(self.db, vendor_id, last_start, last_end)

        this_month_bookings = self.repo.count_vendor_bookings(
            self.db, vendor_id, start=this_start, end=this_end
        )
        last_month_bookings = self.repo.count_vendor_bookings(
            self.db, vendor_id, start=last_start, end=last_end
        )

        avg_rating = self.repo.vendor_average_rating(self.db, vendor_id)
        logger.debug(
            f"📊 Vendor {vendor_id} stats for {self.today:%Y-%m}: "
            f"{this_month_bookings} bookings, ${this_month_earnings:.2f} earned"
        )

        return VendorStats(
            totalEarnings=total_earnings,
            totalBookings=total_bookings,
            avgRating=round(avg_rating, 1) if avg_rating is not None else 0.0,
            thisMonthEarnings=this_month_earnings,
            earningsTrend=calculate_trend(this_month_earnings, last_month_earnings),
            bookingsTrend=calculate_trend(this_month_bookings, last_month_bookings),
        )

    def vendor_monthly_earnings(self, vendor_id: int, months: int = 6) -> list[MonthlyEarnings]:
        month_starts, start, end = self._window(months)
        earnings = self.repo.vendor_earnings_by_month(self.db, vendor_id, start, end)

        return [
            MonthlyEarnings(
                month=month_label(m),
                earnings=earnings.get((m.year, m.month), 0.0),
            )
            for m in month_starts
        ]

    def vendor_rating_distribution(self, vendor_id: int) -> list[RatingDistribution]:
        counts_by_star = self.repo.vendor_rating_counts(self.db, vendor_id)
        counts = [counts_by_star.get(stars, 0) for stars in STAR_RATINGS]
        percentages = whole_percentages(counts)

        return [
            RatingDistribution(stars=stars, count=count, percentage=percentage)
            for stars, count, percentage in zip(STAR_RATINGS, counts, percentages)
        ]

    def vendor_transactions(self, vendor_id: int, limit: int = 20) -> list[VendorTransaction]:
        rows = self.repo.vendor_transactions(self.db, vendor_id, limit)
        return [
            VendorTransaction(
                id=row.id,
                bookingId=row.booking_id,
                serviceTitle=row.service_title,
                customerName=row.customer_name,
                amount=float(row.amount or 0),
                paymentStatus=row.payment_status,
                paymentDate=row.payment_date,
            )
            for row in rows
        ]

    def vendor_pending_payout(self, vendor_id: int) -> float:
        return self.repo.vendor_pending_payout(self.db, vendor_id)

    def vendor_most_booked_services(self, vendor_id: int, limit: int = 5) -> list[MostBookedService]:
        rows = self.repo.vendor_most_booked_services(self.db, vendor_id, limit)
        return [
            MostBookedService(
                serviceId=row.service_id,
                title=row.title,
                bookingCount=int(row.booking_count),
                totalRevenue=round(int(row.booking_count) * float(row.price or 0), 2),
            )
            for row in rows
        ]

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    def admin_stats(self) -> AdminStats:
        this_start, this_end = month_bounds(self.today)
        last_start, last_end = month_bounds(self.today, -1)

        def users_trend(role: str) -> float:
            current = self.repo.count_users(self.db, role, this_start, this_end)
            previous = self.repo.count_users(self.db, role, last_start, last_end)
            return calculate_trend(current, previous)

        this_month_bookings = self.repo.count_bookings(self.db, start=this_start, end=this_end)
        last_month_bookings = self.repo.count_bookings(self.db, start=last_start, end=last_end)
        this_month_revenue = self.repo.sum_revenue(self.db, start=this_start, end=this_end)
        last_month_revenue = self.repo.sum_revenue(self.db, start=last_start, end=last_end)

        return AdminStats(
            totalUsers=self.repo.count_users(self.db, "customer"),
            totalVendors=self.repo.count_users(self.db, "vendor"),
            totalBookings=self.repo.count_bookings(self.db),
            totalRevenue=self.repo.sum_revenue(self.db),
            usersTrend=users_trend("customer"),
            vendorsTrend=users_trend("vendor"),
            bookingsTrend=calculate_trend(this_month_bookings, last_month_bookings),
            revenueTrend=calculate_trend(this_month_revenue, last_month_revenue),
        )

    def admin_user_growth(self, months: int = 6) -> list[MonthlyGrowth]:
        month_starts, start, end = self._window(months)
        signups = self.repo.user_signups_by_month(self.db, start, end)

        result = []
        for m in month_starts:
            users, vendors = signups.get((m.year, m.month), (0, 0))
            result.append(MonthlyGrowth(month=month_label(m), users=users, vendors=vendors))
        return result

    def admin_bookings_trend(self, months: int = 6) -> list[MonthlyBookings]:
        month_starts, start, end = self._window(months)
        bookings = self.repo.bookings_by_month(self.db, start, end)

        return [
            MonthlyBookings(month=month_label(m), bookings=bookings.get((m.year, m.month), 0))
            for m in month_starts
        ]

    # ------------------------------------------------------------------
    # Customer
    # ------------------------------------------------------------------

    def customer_stats(self, customer_id: int) -> CustomerStats:
        this_start, this_end = month_bounds(self.today)
        last_start, last_end = month_bounds(self.today, -1)

        this_month_bookings = self.repo.count_bookings(
            self.db, customer_id=customer_id, start=this_start, end=this_end
        )
        last_month_bookings = self.repo.count_bookings(
            self.db, customer_id=customer_id, start=last_start, end=last_end
        )
        this_month_spent = self.repo.sum_revenue(
            self.db, customer_id=customer_id, start=this_start, end=this_end
        )
        last_month_spent = self.repo.sum_revenue(
            self.db, customer_id=customer_id, start=last_start, end=last_end
        )

        return CustomerStats(
            totalBookings=self.repo.count_bookings(self.db, customer_id=customer_id),
            upcomingBookings=self.repo.count_upcoming_bookings(self.db, customer_id, self.today),
            completedBookings=self.repo.count_bookings(
                self.db, customer_id=customer_id, status="completed"
            ),
            totalSpent=self.repo.sum_revenue(self.db, customer_id=customer_id),
            bookingsTrend=calculate_trend(this_month_bookings, last_month_bookings),
            spentTrend=calculate_trend(this_month_spent, last_month_spent),
        )
