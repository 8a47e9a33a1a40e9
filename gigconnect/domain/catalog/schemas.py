"""Catalog domain schemas - Pydantic models for service discovery"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_validator

PLACEHOLDER_IMAGE = "/placeholder.svg"


class ServiceSort(str, Enum):
    RELEVANCE = "RELEVANCE"
    PRICE_ASC = "PRICE_ASC"
    PRICE_DESC = "PRICE_DESC"
    RATING_DESC = "RATING_DESC"


class ServiceFilter(BaseModel):
    """Listing filter as received from the search page.

    Numeric fields are not validated: values that are not numbers are treated
    as if the filter had not been given.
    """

    search: Optional[str] = None
    categoryId: Optional[str] = None
    minPrice: Optional[float] = None
    maxPrice: Optional[float] = None
    minRating: Optional[float] = None

    @field_validator("minPrice", "maxPrice", "minRating", mode="before")
    @classmethod
    def ignore_non_numeric(cls, v):
        if v is None or isinstance(v, bool):
            return None
        try:
            return float(v)
        except (TypeError, ValueError):
            return None

    @field_validator("categoryId", mode="before")
    @classmethod
    def stringify_category(cls, v):
        """Canonical id text, so " 1" and "01" select category "1" on every source"""
        if v is None:
            return None
        v = str(v).strip()
        if not v:
            return None
        return str(int(v)) if v.isdigit() else v

    @property
    def search_term(self) -> Optional[str]:
        if self.search and self.search.strip():
            return self.search.strip()
        return None


class CategoryResponse(BaseModel):
    id: str
    name: str


class VendorResponse(BaseModel):
    id: str
    displayName: str
    city: str
    region: str


class ServiceResponse(BaseModel):
    """A catalog listing, identical whether served from the database or the static snapshot"""

    id: str
    title: str
    description: str
    price: float  # dollars
    duration: str  # "45 min" / "3 hrs"
    image: str = PLACEHOLDER_IMAGE
    rating: float
    reviews: int
    category: CategoryResponse
    vendor: VendorResponse
