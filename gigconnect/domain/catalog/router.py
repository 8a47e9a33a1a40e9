"""Catalog router - Public FastAPI endpoints for service discovery"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...config import CATALOG_RATE_LIMIT
from ...database import get_optional_db
from ...rate_limiter import create_rate_limiter
from .schemas import CategoryResponse, ServiceFilter, ServiceResponse, ServiceSort
from .service import CatalogService
from .sources import CatalogSource, FallbackCatalogSource
from .sql_source import SqlCatalogSource
from .static_source import StaticCatalogSource

logger = logging.getLogger(__name__)

catalog_rate_limit = create_rate_limiter(
    limit=CATALOG_RATE_LIMIT, window_seconds=60, key_prefix="catalog", fail_open=True
)

router = APIRouter(prefix="/catalog", tags=["Catalog"], dependencies=[Depends(catalog_rate_limit)])


def get_catalog_source(db: Optional[Session] = Depends(get_optional_db)) -> CatalogSource:
    """Live source with static fallback, or the static snapshot alone when no database is configured"""
    if db is None:
        return StaticCatalogSource()
    return FallbackCatalogSource(SqlCatalogSource(db), StaticCatalogSource())


def get_catalog_service(source: CatalogSource = Depends(get_catalog_source)) -> CatalogService:
    """Dependency injection for CatalogService"""
    return CatalogService(source)


@router.get("/categories", response_model=list[CategoryResponse])
def list_categories(service: CatalogService = Depends(get_catalog_service)):
    """All service categories in id order"""
    return service.list_categories()


@router.get("/services", response_model=list[ServiceResponse])
def list_services(
    search: Optional[str] = Query(None),
    category_id: Optional[str] = Query(None, alias="categoryId"),
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    min_rating: Optional[str] = Query(None, alias="minRating"),
    sort: ServiceSort = Query(ServiceSort.RELEVANCE),
    service: CatalogService = Depends(get_catalog_service),
):
    """Active services narrowed by the optional filters, sorted by ``sort``"""
    filters = ServiceFilter(
        search=search,
        categoryId=category_id,
        minPrice=min_price,
        maxPrice=max_price,
        minRating=min_rating,
    )
    return service.list_services(filters, sort)


@router.get("/services/{service_id}", response_model=ServiceResponse)
def get_service(
    service_id: str,
    service: CatalogService = Depends(get_catalog_service),
):
    return service.get_service(service_id)
