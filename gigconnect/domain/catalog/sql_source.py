"""Catalog source backed by the relational store"""

import logging
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import and_, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import Booking, Review, Service, ServiceCategory, Vendor
from ...shared.formatting import format_duration, parse_service_area
from .schemas import (
    PLACEHOLDER_IMAGE,
    CategoryResponse,
    ServiceFilter,
    ServiceResponse,
    ServiceSort,
    VendorResponse,
)
from .sources import CatalogSource

logger = logging.getLogger(__name__)


class SqlCatalogSource(CatalogSource):
    """Live catalog; ratings are averaged over approved reviews joined through bookings"""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _reading(self):
        # A failed statement leaves the session unusable until rolled back
        try:
            yield
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def _rating_avg(self):
        return func.coalesce(func.avg(Review.rating), 0)

    def _listing_query(self):
        rating_avg = self._rating_avg()
        return (
            self.db.query(
                Service,
                ServiceCategory,
                Vendor,
                rating_avg.label("rating_avg"),
                func.count(Review.id).label("reviews_count"),
            )
            .join(ServiceCategory, ServiceCategory.id == Service.category_id)
            .join(Vendor, Vendor.id == Service.vendor_id)
            .outerjoin(Booking, Booking.service_id == Service.id)
            .outerjoin(
                Review,
                and_(Review.booking_id == Booking.id, Review.moderation_status == "approved"),
            )
            .group_by(Service.id, ServiceCategory.id, Vendor.id)
        )

    @staticmethod
    def _to_response(service, category, vendor, rating_avg, reviews_count) -> ServiceResponse:
        city, region = parse_service_area(vendor.service_area)
        return ServiceResponse(
            id=str(service.id),
            title=service.title,
            description=service.description or "",
            price=round(float(service.price or 0), 2),
            duration=format_duration(service.duration_minutes),
            image=service.image_url or PLACEHOLDER_IMAGE,
            rating=float(rating_avg or 0),
            reviews=int(reviews_count or 0),
            category=CategoryResponse(id=str(category.id), name=category.name),
            vendor=VendorResponse(
                id=str(vendor.id),
                displayName=vendor.business_name or "",
                city=city,
                region=region,
            ),
        )

    def list_categories(self) -> list[CategoryResponse]:
        with self._reading():
            categories = self.db.query(ServiceCategory).order_by(ServiceCategory.id.asc()).all()
        return [CategoryResponse(id=str(c.id), name=c.name) for c in categories]

    def list_services(
        self, filters: Optional[ServiceFilter] = None, sort: ServiceSort = ServiceSort.RELEVANCE
    ) -> list[ServiceResponse]:
        filters = filters or ServiceFilter()
        rating_avg = self._rating_avg()

        query = self._listing_query().filter(
            or_(Service.is_active.is_(None), Service.is_active.is_(True))
        )

        if filters.categoryId is not None:
            try:
                category_id = int(filters.categoryId)
            except ValueError:
                return []
            query = query.filter(Service.category_id == category_id)

        if filters.search_term:
            term = filters.search_term
            # % and _ in the term are literal text
            query = query.filter(
                or_(
                    Service.title.icontains(term, autoescape=True),
                    Service.description.icontains(term, autoescape=True),
                    Vendor.business_name.icontains(term, autoescape=True),
                )
            )

        if filters.minPrice is not None:
            query = query.filter(Service.price >= filters.minPrice)

        if filters.maxPrice is not None:
            query = query.filter(Service.price <= filters.maxPrice)

        if filters.minRating is not None:
            query = query.having(rating_avg >= filters.minRating)

        if sort == ServiceSort.PRICE_ASC:
            query = query.order_by(Service.price.asc().nulls_last(), Service.id.asc())
        elif sort == ServiceSort.PRICE_DESC:
            query = query.order_by(Service.price.desc().nulls_last(), Service.id.asc())
        else:
            # RATING_DESC and RELEVANCE; the search term does not affect order
            query = query.order_by(rating_avg.desc(), Service.id.asc())

        with self._reading():
            rows = query.all()

        logger.debug(f"Catalog query returned {len(rows)} services (sort={sort.value})")
        return [self._to_response(*row) for row in rows]

    def get_service(self, service_id: str) -> Optional[ServiceResponse]:
        try:
            numeric_id = int(service_id)
        except (TypeError, ValueError):
            return None

        with self._reading():
            row = self._listing_query().filter(Service.id == numeric_id).first()

        if row is None:
            return None
        return self._to_response(*row)
