"""Analytics repository - Read-only aggregate queries for dashboards"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import case, extract, func
from sqlalchemy.orm import Query, Session

from ...models import (
    REVENUE_BOOKING_STATUSES,
    AvailabilitySlot,
    Booking,
    Payment,
    Review,
    Service,
    User,
)

MonthKey = tuple[int, int]


def _within(query: Query, column, start: Optional[datetime], end: Optional[datetime]) -> Query:
    """Restrict a query to the half-open period [start, end)"""
    if start is not None:
        query = query.filter(column >= start)
    if end is not None:
        query = query.filter(column < end)
    return query


def _month_key(year, month) -> MonthKey:
    # EXTRACT returns numerics on PostgreSQL and integers on SQLite
    return int(year), int(month)


class AnalyticsRepository:
    """Repository for analytics database queries"""

    # ------------------------------------------------------------------
    # Vendor queries
    # ------------------------------------------------------------------

    @staticmethod
    def sum_vendor_earnings(
        db: Session,
        vendor_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> float:
        """Sum of service prices over the vendor's accepted/completed bookings"""
        query = (
            db.query(func.coalesce(func.sum(Service.price), 0))
            .select_from(Booking)
            .join(Service, Booking.service_id == Service.id)
            .filter(Service.vendor_id == vendor_id, Booking.status.in_(REVENUE_BOOKING_STATUSES))
        )
        query = _within(query, Booking.booking_date, start, end)
        return float(query.scalar() or 0)

    @staticmethod
    def count_vendor_bookings(
        db: Session,
        vendor_id: int,
        statuses: Optional[tuple[str, ...]] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> int:
        """Count bookings for the vendor's services, optionally by status"""
        query = (
            db.query(func.count(Booking.id))
            .select_from(Booking)
            .join(Service, Booking.service_id == Service.id)
            .filter(Service.vendor_id == vendor_id)
        )
        if statuses:
            query = query.filter(Booking.status.in_(statuses))
        query = _within(query, Booking.booking_date, start, end)
        return int(query.scalar() or 0)

    @staticmethod
    def vendor_average_rating(db: Session, vendor_id: int) -> Optional[float]:
        """Average approved review rating across the vendor's services"""
        value = (
            db.query(func.avg(Review.rating))
            .select_from(Review)
            .join(Booking, Review.booking_id == Booking.id)
            .join(Service, Booking.service_id == Service.id)
            .filter(Service.vendor_id == vendor_id, Review.moderation_status == "approved")
            .scalar()
        )
        return float(value) if value is not None else None

    @staticmethod
    def vendor_earnings_by_month(
        db: Session, vendor_id: int, start: datetime, end: datetime
    ) -> dict[MonthKey, float]:
        """Accepted/completed earnings grouped by (year, month) of booking date"""
        year = extract("year", Booking.booking_date)
        month = extract("month", Booking.booking_date)
        rows = (
            db.query(
                year.label("year"),
                month.label("month"),
                func.coalesce(func.sum(Service.price), 0).label("earnings"),
            )
            .select_from(Booking)
            .join(Service, Booking.service_id == Service.id)
            .filter(
                Service.vendor_id == vendor_id,
                Booking.status.in_(REVENUE_BOOKING_STATUSES),
                Booking.booking_date >= start,
                Booking.booking_date < end,
            )
            .group_by(year, month)
            .all()
        )
        return {_month_key(r.year, r.month): float(r.earnings or 0) for r in rows}

    @staticmethod
    def vendor_rating_counts(db: Session, vendor_id: int) -> dict[int, int]:
        """Number of approved reviews per star rating"""
        rows = (
            db.query(Review.rating, func.count(Review.id).label("count"))
            .select_from(Review)
            .join(Booking, Review.booking_id == Booking.id)
            .join(Service, Booking.service_id == Service.id)
            .filter(Service.vendor_id == vendor_id, Review.moderation_status == "approved")
            .group_by(Review.rating)
            .all()
        )
        return {int(r.rating): int(r.count) for r in rows}

    @staticmethod
    def vendor_transactions(db: Session, vendor_id: int, limit: int) -> list:
        """Most recent payments for the vendor's bookings, undated payments last"""
        return (
            db.query(
                Payment.id,
                Payment.booking_id,
                Service.title.label("service_title"),
                User.name.label("customer_name"),
                Payment.amount,
                Payment.payment_status,
                Payment.payment_date,
            )
            .select_from(Payment)
            .join(Booking, Payment.booking_id == Booking.id)
            .join(Service, Booking.service_id == Service.id)
            .join(User, Booking.customer_id == User.id)
            .filter(Service.vendor_id == vendor_id)
            .order_by(Payment.payment_date.desc().nulls_last(), Payment.id.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def vendor_pending_payout(db: Session, vendor_id: int) -> float:
        """Successful payments on accepted/completed bookings"""
        value = (
            db.query(func.coalesce(func.sum(Payment.amount), 0))
            .select_from(Payment)
            .join(Booking, Payment.booking_id == Booking.id)
            .join(Service, Booking.service_id == Service.id)
            .filter(
                Service.vendor_id == vendor_id,
                Payment.payment_status == "success",
                Booking.status.in_(REVENUE_BOOKING_STATUSES),
            )
            .scalar()
        )
        return float(value or 0)

    @staticmethod
    def vendor_most_booked_services(db: Session, vendor_id: int, limit: int) -> list:
        """Vendor services ranked by accepted/completed booking count"""
        booking_count = func.count(Booking.id)
        return (
            db.query(
                Service.id.label("service_id"),
                Service.title,
                Service.price,
                booking_count.label("booking_count"),
            )
            .select_from(Service)
            .outerjoin(
                Booking,
                (Booking.service_id == Service.id) & Booking.status.in_(REVENUE_BOOKING_STATUSES),
            )
            .filter(Service.vendor_id == vendor_id)
            .group_by(Service.id, Service.title, Service.price)
            .order_by(booking_count.desc(), Service.id.asc())
            .limit(limit)
            .all()
        )

    # ------------------------------------------------------------------
    # Platform-wide queries
    # ------------------------------------------------------------------

    @staticmethod
    def count_users(
        db: Session,
        role: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> int:
        query = db.query(func.count(User.id)).filter(User.role == role)
        query = _within(query, User.created_at, start, end)
        return int(query.scalar() or 0)

    @staticmethod
    def count_bookings(
        db: Session,
        customer_id: Optional[int] = None,
        status: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> int:
        """Count bookings, platform-wide or for one customer"""
        query = db.query(func.count(Booking.id)).select_from(Booking)
        if customer_id is not None:
            query = query.filter(Booking.customer_id == customer_id)
        if status is not None:
            query = query.filter(Booking.status == status)
        query = _within(query, Booking.booking_date, start, end)
        return int(query.scalar() or 0)

    @staticmethod
    def sum_revenue(
        db: Session,
        customer_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> float:
        """Service price summed over accepted/completed bookings"""
        query = (
            db.query(func.coalesce(func.sum(Service.price), 0))
            .select_from(Booking)
            .join(Service, Booking.service_id == Service.id)
            .filter(Booking.status.in_(REVENUE_BOOKING_STATUSES))
        )
        if customer_id is not None:
            query = query.filter(Booking.customer_id == customer_id)
        query = _within(query, Booking.booking_date, start, end)
        return float(query.scalar() or 0)

    @staticmethod
    def user_signups_by_month(db: Session, start: datetime, end: datetime) -> dict[MonthKey, tuple[int, int]]:
        """(customers, vendors) registered per (year, month)"""
        year = extract("year", User.created_at)
        month = extract("month", User.created_at)
        rows = (
            db.query(
                year.label("year"),
                month.label("month"),
                func.sum(case((User.role == "customer", 1), else_=0)).label("users"),
                func.sum(case((User.role == "vendor", 1), else_=0)).label("vendors"),
            )
            .filter(User.created_at >= start, User.created_at < end)
            .group_by(year, month)
            .all()
        )
        return {_month_key(r.year, r.month): (int(r.users or 0), int(r.vendors or 0)) for r in rows}

    @staticmethod
    def bookings_by_month(db: Session, start: datetime, end: datetime) -> dict[MonthKey, int]:
        year = extract("year", Booking.booking_date)
        month = extract("month", Booking.booking_date)
        rows = (
            db.query(year.label("year"), month.label("month"), func.count(Booking.id).label("bookings"))
            .filter(Booking.booking_date >= start, Booking.booking_date < end)
            .group_by(year, month)
            .all()
        )
        return {_month_key(r.year, r.month): int(r.bookings) for r in rows}

    @staticmethod
    def count_upcoming_bookings(db: Session, customer_id: int, today: date) -> int:
        """Accepted bookings whose slot is today or later"""
        value = (
            db.query(func.count(Booking.id))
            .select_from(Booking)
            .join(AvailabilitySlot, Booking.slot_id == AvailabilitySlot.id)
            .filter(
                Booking.customer_id == customer_id,
                Booking.status == "accepted",
                AvailabilitySlot.slot_date >= today,
            )
            .scalar()
        )
        return int(value or 0)
