"""Domain exceptions for the storefront core.

These map to consistent HTTP responses when handled by the global exception handler.
"""


class StorefrontError(Exception):
    """Base exception for storefront domain errors."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 500,
        detail: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = detail or message


class InvalidEngineCallError(StorefrontError):
    """Raised when the filter engine is called with a contract-violating argument."""

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message, status_code=400, detail=detail or message)


class CatalogFetchError(StorefrontError):
    """Raised when the product listing cannot be fetched from the backend."""

    def __init__(self, message: str = "Failed to fetch products", detail: str | None = None) -> None:
        super().__init__(message, status_code=502, detail=detail or message)


class StockCheckError(StorefrontError):
    """Raised when the batched stock check fails."""

    def __init__(self, message: str = "Failed to check stock", detail: str | None = None) -> None:
        super().__init__(message, status_code=502, detail=detail or message)


class ProductNotFoundError(StorefrontError):
    """Raised when a requested product does not exist."""

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message, status_code=404, detail=detail or message)
