"""API routes for catalog queries and stock checks."""

import logging
from datetime import timedelta
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from storefront_core.api.repository import ProductRepository, stock_level
from storefront_core.catalog.categories import CategoryProfile, get_profile
from storefront_core.catalog.engine import CatalogFilterEngine
from storefront_core.catalog.pagination import build_page
from storefront_core.config import get_settings
from storefront_core.models.filters import FilterState, NumericRange
from storefront_core.models.product import ProductCategory

logger = logging.getLogger(__name__)

router = APIRouter()


def get_repository(request: Request) -> ProductRepository:
    """Get the product repository attached to the application."""
    repository = getattr(request.app.state, "repository", None)
    if repository is None:
        raise HTTPException(status_code=503, detail="Product repository not initialized")
    return repository


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    products: int


class ProductPageResponse(BaseModel):
    """One page of catalog results."""

    success: bool = True
    products: list[dict[str, Any]] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    pages: int = 0
    page_size: int = 12
    options: dict[str, list[str]] = Field(default_factory=dict)


def build_filters(profile: CategoryProfile, params: dict[str, str]) -> FilterState:
    """
    Translate query parameters into a FilterState.

    Categorical dimensions are passed by name (``?color=Red``); numeric ranges as
    ``<name>_min`` / ``<name>_max``. Unknown parameters are ignored.
    """
    categorical = {
        dim.name: params[dim.name] for dim in profile.categorical if dim.name in params
    }
    ranges = {}
    for dim in profile.ranges:
        low = params.get(f"{dim.name}_min", "")
        high = params.get(f"{dim.name}_max", "")
        if low or high:
            ranges[dim.name] = NumericRange(min=low, max=high)

    return FilterState(
        search=params.get("search", ""),
        categorical=categorical,
        ranges=ranges,
        rating=float(params.get("rating") or 0),
        stock=params.get("stock") or "all",
        discount_only=params.get("discount", "").lower() in ("1", "true", "yes"),
        sort_by=params.get("sort") or "name",
        expiry=params.get("expiry") or "all",
    )


@router.get("/health", response_model=HealthResponse)
async def health(repository: ProductRepository = Depends(get_repository)) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=get_settings().service_version,
        products=len(repository),
    )


@router.get(
    "/api/product",
    response_model=ProductPageResponse,
    summary="List products",
    description="Filter, sort and paginate the catalog of one category.",
)
async def list_products(
    request: Request,
    category: ProductCategory | None = Query(default=None, alias="type", description="Product category"),
    page: int = Query(default=1, ge=1),
    page_size: int | None = Query(default=None, ge=1, le=100),
    repository: ProductRepository = Depends(get_repository),
) -> ProductPageResponse:
    """
    List products of a category through the catalog filter engine.

    Without ``type`` the whole catalog is returned unfiltered.
    """
    settings = get_settings()
    size = page_size or settings.catalog_page_size

    if category is None:
        products = repository.all()
        result = build_page(products, page, size)
        return ProductPageResponse(
            products=[p.model_dump(mode="json", by_alias=True) for p in result.items],
            total=result.total_items,
            page=page,
            pages=result.total_pages,
            page_size=size,
        )

    profile = get_profile(category)
    try:
        filters = build_filters(profile, dict(request.query_params))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    engine = CatalogFilterEngine(profile, expiring_soon=timedelta(days=settings.expiring_soon_days))
    products = repository.all(category)
    result = engine.page(products, filters, page, size)

    return ProductPageResponse(
        products=[p.model_dump(mode="json", by_alias=True) for p in result.items],
        total=result.total_items,
        page=page,
        pages=result.total_pages,
        page_size=size,
        options=engine.filter_options(products),
    )


@router.get("/api/product/suggestions")
async def suggestions(
    category: ProductCategory = Query(alias="type"),
    q: str = "",
    repository: ProductRepository = Depends(get_repository),
) -> dict[str, Any]:
    """Search suggestions for a category."""
    settings = get_settings()
    engine = CatalogFilterEngine(category)
    return {
        "success": True,
        "suggestions": engine.suggestions(
            repository.all(category),
            q,
            limit=settings.suggestion_limit,
            min_length=settings.suggestion_min_length,
        ),
    }


@router.get("/api/product/{product_id}/check-stock")
async def check_stock(
    product_id: str,
    repository: ProductRepository = Depends(get_repository),
) -> dict[str, Any]:
    """Current stock of one product."""
    product = repository.get(product_id)
    level = stock_level(product)
    return {
        "success": True,
        "product": {**level.model_dump(by_alias=True), "available": product.stock > 0},
    }


@router.post("/api/product/stock-sync")
async def stock_sync(
    request: Request,
    repository: ProductRepository = Depends(get_repository),
) -> JSONResponse:
    """Batched stock lookup for the cart reconciliation pass."""
    try:
        body = await request.json()
    except ValueError:
        body = None

    product_ids = body.get("productIds") if isinstance(body, dict) else None
    if not isinstance(product_ids, list):
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": "Invalid product IDs"},
        )

    levels = await repository.check_stock([str(pid) for pid in product_ids])
    return JSONResponse(
        content={
            "success": True,
            "products": [level.model_dump(by_alias=True) for level in levels.values()],
        }
    )
