"""Catalog service - Business logic for public service discovery"""

import logging
from typing import Optional

from fastapi import HTTPException

from .schemas import CategoryResponse, ServiceFilter, ServiceResponse, ServiceSort
from .sources import CatalogSource

logger = logging.getLogger(__name__)


class CatalogService:
    """Service layer for the public catalog; unaware of which source backs it"""

    def __init__(self, source: CatalogSource):
        self.source = source

    def list_categories(self) -> list[CategoryResponse]:
        return self.source.list_categories()

    def list_services(
        self, filters: Optional[ServiceFilter] = None, sort: ServiceSort = ServiceSort.RELEVANCE
    ) -> list[ServiceResponse]:
        return self.source.list_services(filters, sort)

    def get_service(self, service_id: str) -> ServiceResponse:
        service = self.source.get_service(service_id)
        if service is None:
            raise HTTPException(status_code=404, detail="Service not found")
        return service
