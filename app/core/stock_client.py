import logging
import httpx
from typing import Optional

from pydantic import ValidationError

from app.core.config import settings
from app.core.exceptions import StockServiceError
from app.schemas.cart import Product, StockSnapshot

logger = logging.getLogger(__name__)


class StockClient:
    """HTTP client for the stock and product API."""

    def __init__(
        self,
        base_url: str = None,
        timeout: float = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = (base_url or settings.STOCK_API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.STOCK_API_TIMEOUT
        self.transport = transport
        self.client = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self.client is None:
            self.client = httpx.AsyncClient(timeout=self.timeout, transport=self.transport)
        return self.client

    async def _get_json(self, path: str):
        client = await self._get_client()
        url = f"{self.base_url}{path}"
        try:
            response = await client.get(url)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"GET {url} failed with status {e.response.status_code}: {e.response.text}")
            raise StockServiceError(f"GET {path} returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"GET {url} failed: {str(e)}")
            raise StockServiceError(f"GET {path} failed: {str(e)}") from e
        except ValueError as e:
            logger.error(f"GET {url} returned a non-JSON body")
            raise StockServiceError(f"GET {path} returned invalid JSON") from e

    async def get_stock(self, product_id: int) -> StockSnapshot:
        """
        Get real-time stock for a product.

        GET /stock/{id}
        Returns: {"id": 1, "amount": 3}
        """
        data = await self._get_json(f"/stock/{product_id}")
        try:
            stock = StockSnapshot.model_validate(data)
        except ValidationError as e:
            raise StockServiceError(f"Malformed stock response for product {product_id}") from e
        logger.debug(f"Stock for product {product_id}: {stock.amount}")
        return stock

    async def get_product(self, product_id: int) -> Product:
        """
        Get product details.

        GET /products/{id}
        Returns: {"id": 1, "title": "...", "price": 179.9, "image": "https://..."}
        """
        data = await self._get_json(f"/products/{product_id}")
        try:
            product = Product.model_validate(data)
        except ValidationError as e:
            raise StockServiceError(f"Malformed product response for product {product_id}") from e
        if product.id != product_id:
            raise StockServiceError(f"Asked for product {product_id}, got product {product.id}")
        return product

    async def close(self):
        """Close HTTP client."""
        if self.client:
            await self.client.aclose()
            self.client = None


# Global instance
stock_client = StockClient()
