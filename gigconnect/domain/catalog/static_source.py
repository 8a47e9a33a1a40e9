"""In-memory catalog served from the static snapshot in ``fallback_data``"""

import math
from typing import Optional

from ...shared.formatting import dollars_from_cents, format_duration
from . import fallback_data
from .schemas import (
    PLACEHOLDER_IMAGE,
    CategoryResponse,
    ServiceFilter,
    ServiceResponse,
    ServiceSort,
    VendorResponse,
)
from .sources import CatalogReferenceError, CatalogSource


def _id_key(value: str) -> tuple:
    """Order numeric ids numerically and anything else after them, alphabetically"""
    return (0, int(value), "") if value.isdigit() else (1, 0, value)


def _round_one_decimal(value: float) -> float:
    return math.floor(value * 10 + 0.5) / 10


class StaticCatalogSource(CatalogSource):
    """Catalog backed by a fixed snapshot; filtering and sorting run in-process"""

    def __init__(
        self,
        categories: Optional[list[dict]] = None,
        vendors: Optional[list[dict]] = None,
        services: Optional[list[dict]] = None,
        reviews: Optional[list[dict]] = None,
    ):
        self.categories = fallback_data.CATEGORIES if categories is None else categories
        self.vendors = fallback_data.VENDORS if vendors is None else vendors
        self.services = fallback_data.SERVICES if services is None else services
        self.reviews = fallback_data.REVIEWS if reviews is None else reviews

    # Lookups ---------------------------------------------------------------

    def _find_vendor(self, vendor_id: str) -> Optional[dict]:
        return next((v for v in self.vendors if v["id"] == vendor_id), None)

    def _find_category(self, category_id: str) -> Optional[dict]:
        return next((c for c in self.categories if c["id"] == category_id), None)

    def rating_stats(self, service_id: str) -> tuple[float, int]:
        """(average rating rounded to one decimal, review count) for a service"""
        ratings = [r["rating"] for r in self.reviews if r["service_id"] == service_id]
        if not ratings:
            return 0.0, 0
        return _round_one_decimal(sum(ratings) / len(ratings)), len(ratings)

    def _price(self, service: dict) -> float:
        return dollars_from_cents(service["price_cents"])

    def _to_response(self, service: dict) -> ServiceResponse:
        category = self._find_category(service["category_id"])
        if category is None:
            raise CatalogReferenceError(f"Category not found for service {service['id']}")

        vendor = self._find_vendor(service["vendor_id"])
        if vendor is None:
            raise CatalogReferenceError(f"Vendor not found for service {service['id']}")

        rating, review_count = self.rating_stats(service["id"])
        return ServiceResponse(
            id=service["id"],
            title=service["title"],
            description=service.get("description") or "",
            price=self._price(service),
            duration=format_duration(service.get("duration_minutes")),
            image=service.get("image_url") or PLACEHOLDER_IMAGE,
            rating=rating,
            reviews=review_count,
            category=CategoryResponse(id=category["id"], name=category["name"]),
            vendor=VendorResponse(
                id=vendor["id"],
                displayName=vendor["display_name"],
                city=vendor["city"],
                region=vendor["region"],
            ),
        )

    def _matches_search(self, service: dict, term: str) -> bool:
        term = term.lower()
        vendor = self._find_vendor(service["vendor_id"])
        return (
            term in service["title"].lower()
            or term in (service.get("description") or "").lower()
            or (vendor is not None and term in vendor["display_name"].lower())
        )

    # CatalogSource ---------------------------------------------------------

    def list_categories(self) -> list[CategoryResponse]:
        ordered = sorted(self.categories, key=lambda c: _id_key(c["id"]))
        return [CategoryResponse(id=c["id"], name=c["name"]) for c in ordered]

    def list_services(
        self, filters: Optional[ServiceFilter] = None, sort: ServiceSort = ServiceSort.RELEVANCE
    ) -> list[ServiceResponse]:
        filters = filters or ServiceFilter()
        listing = [s for s in self.services if s.get("active", True)]

        if filters.categoryId is not None:
            listing = [s for s in listing if s["category_id"] == filters.categoryId]

        if filters.search_term:
            listing = [s for s in listing if self._matches_search(s, filters.search_term)]

        if filters.minPrice is not None:
            listing = [s for s in listing if self._price(s) >= filters.minPrice]

        if filters.maxPrice is not None:
            listing = [s for s in listing if self._price(s) <= filters.maxPrice]

        if filters.minRating is not None:
            listing = [s for s in listing if self.rating_stats(s["id"])[0] >= filters.minRating]

        if sort == ServiceSort.PRICE_ASC:
            listing.sort(key=lambda s: (s["price_cents"], _id_key(s["id"])))
        elif sort == ServiceSort.PRICE_DESC:
            listing.sort(key=lambda s: (-s["price_cents"], _id_key(s["id"])))
        else:
            # RATING_DESC and RELEVANCE; the search term does not affect order
            listing.sort(key=lambda s: (-self.rating_stats(s["id"])[0], _id_key(s["id"])))

        return [self._to_response(s) for s in listing]

    def get_service(self, service_id: str) -> Optional[ServiceResponse]:
        service = next((s for s in self.services if s["id"] == str(service_id)), None)
        if service is None:
            return None
        return self._to_response(service)
