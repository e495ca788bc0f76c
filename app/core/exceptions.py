class CartError(Exception):
    """Base class for cart errors."""


class StockUnavailableError(CartError):
    """Requested amount is above what the stock service reports."""

    def __init__(self, product_id: int, requested: int, available: int):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Product {product_id}: requested {requested}, only {available} in stock"
        )


class CartItemNotFoundError(CartError):
    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product {product_id} is not in the cart")


class StockServiceError(CartError):
    """Stock or product request failed (transport, status or payload)."""


class CorruptCartError(CartError):
    """Persisted cart could not be decoded."""
