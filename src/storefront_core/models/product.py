"""Catalog models for products and their category-specific details."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ProductCategory(str, Enum):
    """Category discriminant of a product."""

    BOOK = "book"
    STATIONARY = "stationary"
    FLOWER = "flower"


# Backend records carry a capitalized model reference next to (or instead of) ``type``.
_TYPE_REFS = {
    "Book": ProductCategory.BOOK,
    "Stationary": ProductCategory.STATIONARY,
    "Flower": ProductCategory.FLOWER,
}


def as_utc(value: datetime) -> datetime:
    """Return an aware datetime, treating naive values as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Review(BaseModel):
    """Customer review attached to a product."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: str | None = Field(default=None, alias="userId")
    user_name: str | None = Field(default=None, alias="userName")
    rating: float = Field(ge=0, le=5)
    comment: str = ""
    created_at: datetime | None = Field(default=None, alias="createdAt")


class BookDetails(BaseModel):
    """Detail record for books. Fields the backend omits stay None."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    author: str | None = None
    pages: int | None = Field(default=None, ge=0)
    isbn: str = ""
    publisher: str = ""
    genre: str = ""
    language: str = ""
    publication_date: datetime | None = Field(default=None, alias="publicationDate")


class Dimensions(BaseModel):
    """Physical dimensions of a stationery item."""

    height: float = 0
    width: float = 0
    depth: float = 0


class StationaryDetails(BaseModel):
    """Detail record for stationery. ``color`` is multi-valued."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    brand: str | None = None
    color: list[str] = Field(default_factory=list)
    type: str = ""
    material: str = ""
    dimensions: Dimensions | None = None

    @model_validator(mode="before")
    @classmethod
    def _wrap_single_color(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("color"), str):
            return {**data, "color": [data["color"]]}
        return data


class FlowerDetails(BaseModel):
    """Detail record for flowers."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    color: str | None = None
    freshness: float | None = Field(default=None, ge=0, le=100)
    lifespan: float | None = Field(default=None, ge=0, description="Lifespan in days")
    season: str | None = None
    care_instructions: str = Field(default="", alias="careInstructions")
    expiry_date: datetime | None = Field(default=None, alias="expiryDate")


DETAIL_MODELS: dict[ProductCategory, type[BaseModel]] = {
    ProductCategory.BOOK: BookDetails,
    ProductCategory.STATIONARY: StationaryDetails,
    ProductCategory.FLOWER: FlowerDetails,
}


class Product(BaseModel):
    """
    Unified, read-only product record as returned by the listing endpoint.

    ``details`` keeps the raw category-specific record. Typed access goes through
    ``typed_details()``, which validates lazily so a single malformed record only
    affects the product that carries it.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    id: str = Field(alias="_id", description="Opaque product identifier")
    category: ProductCategory = Field(alias="type")
    name: str
    price: float = Field(ge=0)
    discount: float = Field(default=0, ge=0, le=100, description="Discount percent")
    stock: int = Field(default=0, ge=0)
    image: str = ""
    description: str | None = Field(default=None, alias="Description")
    reviews: list[Review] = Field(default_factory=list)
    average_rating: float = Field(default=0, ge=0, le=5, alias="averageRating")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
    details: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _normalize_record(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)

        if "type" not in data and "category" not in data and data.get("typeRef") in _TYPE_REFS:
            data["type"] = _TYPE_REFS[data["typeRef"]]
        if "_id" in data and not isinstance(data["_id"], str):
            data["_id"] = str(data["_id"])

        # Derive the aggregate rating when the backend did not send one
        if data.get("averageRating") is None and data.get("average_rating") is None:
            ratings = [
                review.get("rating", 0) if isinstance(review, dict) else review.rating
                for review in data.get("reviews") or []
            ]
            data["averageRating"] = sum(ratings) / len(ratings) if ratings else 0
        if data.get("details") is None:
            data["details"] = {}
        return data

    @property
    def final_price(self) -> float:
        """Unit price after discount."""
        if self.discount > 0:
            return self.price * (1 - self.discount / 100)
        return self.price

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    def typed_details(self) -> BookDetails | StationaryDetails | FlowerDetails:
        """Validate and return the category-specific detail record.

        Raises:
            pydantic.ValidationError: If the detail record is malformed.
        """
        return DETAIL_MODELS[self.category].model_validate(self.details)

    def book_details(self) -> BookDetails:
        return BookDetails.model_validate(self.details)

    def stationary_details(self) -> StationaryDetails:
        return StationaryDetails.model_validate(self.details)

    def flower_details(self) -> FlowerDetails:
        return FlowerDetails.model_validate(self.details)


class StockLevel(BaseModel):
    """Authoritative stock for one product, as returned by the stock-sync endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    product_id: str = Field(alias="_id")
    name: str | None = None
    stock: int = Field(ge=0)
    price: float | None = None
    discount: float | None = None

    @model_validator(mode="before")
    @classmethod
    def _stringify_id(cls, data: Any) -> Any:
        if isinstance(data, dict) and "_id" in data and not isinstance(data["_id"], str):
            return {**data, "_id": str(data["_id"])}
        return data


class ProductListing(BaseModel):
    """Product listing response. Pagination metadata is informational only."""

    products: list[Product] = Field(default_factory=list)
    total: int = 0
    page: int | None = None
    pages: int | None = None
