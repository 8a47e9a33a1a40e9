"""Catalog data sources

Every source answers the same three questions (categories, filtered services,
single service) with the same response models. Which source backs a request is
decided once, when the request's dependencies are built.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from .schemas import CategoryResponse, ServiceFilter, ServiceResponse, ServiceSort

logger = logging.getLogger(__name__)


class CatalogReferenceError(LookupError):
    """A service points at a category or vendor that does not exist"""


class CatalogSource(ABC):
    @abstractmethod
    def list_categories(self) -> list[CategoryResponse]: ...

    @abstractmethod
    def list_services(
        self, filters: Optional[ServiceFilter] = None, sort: ServiceSort = ServiceSort.RELEVANCE
    ) -> list[ServiceResponse]: ...

    @abstractmethod
    def get_service(self, service_id: str) -> Optional[ServiceResponse]: ...


class FallbackCatalogSource(CatalogSource):
    """Serve from ``primary`` and re-run the operation on ``fallback`` when a query fails"""

    def __init__(self, primary: CatalogSource, fallback: CatalogSource):
        self.primary = primary
        self.fallback = fallback

    def _run(self, operation: str, *args):
        try:
            return getattr(self.primary, operation)(*args)
        except SQLAlchemyError as e:
            logger.warning(f"⚠️ Catalog {operation} query failed; falling back to static data: {e}")
            return getattr(self.fallback, operation)(*args)

    def list_categories(self) -> list[CategoryResponse]:
        return self._run("list_categories")

    def list_services(
        self, filters: Optional[ServiceFilter] = None, sort: ServiceSort = ServiceSort.RELEVANCE
    ) -> list[ServiceResponse]:
        return self._run("list_services", filters, sort)

    def get_service(self, service_id: str) -> Optional[ServiceResponse]:
        return self._run("get_service", service_id)
