"""Merchandise models"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field


class MerchandiseCategory(str, Enum):
    APPAREL = "apparel"
    CLOTHING = "clothing"
    ACCESSORIES = "accessories"
    SOUVENIRS = "souvenirs"
    COLLECTIBLES = "collectibles"
    BOOKS = "books"
    ELECTRONICS = "electronics"


class MerchandiseSortField(str, Enum):
    NAME = "name"
    PRICE = "price"
    STOCK_QUANTITY = "stock_quantity"
    AVERAGE_RATING = "average_rating"
    SALES_COUNT = "sales_count"
    DATE_ADDED = "date_added"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class Merchandise(BaseModel):
    """Merchandise item in the catalog"""
    id: str
    name: str
    description: str
    price: Decimal = Field(gt=0, decimal_places=2)
    category: MerchandiseCategory
    stock_quantity: int = Field(ge=0, default=0)
    image_url: Optional[str] = None
    is_active: bool = True
    sales_count: int = 0
    average_rating: float = 0.0
    review_count: int = 0
    date_added: datetime = Field(default_factory=datetime.utcnow)
    last_updated: datetime = Field(default_factory=datetime.utcnow)

    @computed_field
    @property
    def stock_status(self) -> str:
        if self.stock_quantity == 0:
            return "Out of Stock"
        if self.stock_quantity <= 5:
            return "Low Stock"
        if self.stock_quantity <= 20:
            return "Limited Stock"
        return "In Stock"

    def to_ref(self) -> "MerchandiseRef":
        return MerchandiseRef(
            id=self.id,
            name=self.name,
            unit_price=self.price,
            stock_quantity=self.stock_quantity,
            is_active=self.is_active,
        )


@dataclass(frozen=True)
class MerchandiseRef:
    """Read-only snapshot of a catalog entry, as seen by a cart"""
    id: str
    name: str
    unit_price: Decimal
    stock_quantity: int
    is_active: bool


class MerchandiseSearchResponse(BaseModel):
    """Response from merchandise search"""
    items: list[Merchandise]
    total: int
    limit: int
    offset: int


class MerchandiseUpdateRequest(BaseModel):
    """Partial update of a catalog entry"""
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, gt=0)
    category: Optional[MerchandiseCategory] = None
    stock_quantity: Optional[int] = Field(default=None, ge=0)
    image_url: Optional[str] = None
    is_active: Optional[bool] = None


class RatingRequest(BaseModel):
    rating: int = Field(ge=1, le=5)


class RestockRequest(BaseModel):
    quantity: int = Field(gt=0)
