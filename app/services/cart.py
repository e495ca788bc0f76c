import asyncio
import logging
from decimal import Decimal
from typing import List, Optional

from app.core import notifications
from app.core.exceptions import CartItemNotFoundError, StockUnavailableError
from app.core.notifications import Notifier
from app.core.stock_client import StockClient
from app.schemas.cart import (
    CartItem, CartItemResponse, CartMutationResult, CartOutcome, CartSummary
)
from app.services.cart_codec import decode_cart, encode_cart
from app.services.storage import CartStorage

logger = logging.getLogger(__name__)


class CartStore:
    """
    Shopping cart validated against the stock API and mirrored to durable storage.

    Rules:
    - An item's amount never goes above the stock reported at the time of the change
    - Items are unique by product id; adding an item again increments its amount
    - Storage is written after every applied change, before the new state is visible
    - add/remove/update never raise; failures are reported through the notifier
    - One operation at a time (guarded by a lock)
    """

    def __init__(self, stock_client: StockClient, storage: CartStorage, notifier: Notifier):
        self.stock_client = stock_client
        self.storage = storage
        self.notifier = notifier
        self._items: List[CartItem] = []
        self._lock = asyncio.Lock()

    async def load(self) -> List[CartItem]:
        """Load the cart from storage. A corrupt stored cart raises CorruptCartError."""
        stored = await self.storage.get()
        self._items = decode_cart(stored) if stored is not None else []
        logger.info(f"Loaded cart with {len(self._items)} items")
        return self.cart

    @property
    def cart(self) -> List[CartItem]:
        return list(self._items)

    def _find(self, product_id: int) -> Optional[CartItem]:
        return next((item for item in self._items if item.id == product_id), None)

    async def _commit(self, items: List[CartItem]) -> CartMutationResult:
        await self.storage.set(encode_cart(items))
        self._items = items
        return CartMutationResult(outcome=CartOutcome.APPLIED, cart=self.cart)

    def _reject(self, outcome: CartOutcome, message: str) -> CartMutationResult:
        self.notifier.notify_error(message)
        return CartMutationResult(outcome=outcome, cart=self.cart, message=message)

    async def add_product(self, product_id: int) -> CartMutationResult:
        async with self._lock:
            try:
                stock = await self.stock_client.get_stock(product_id)
                existing = self._find(product_id)
                in_cart = existing.amount if existing else 0

                if in_cart >= stock.amount:
                    raise StockUnavailableError(product_id, in_cart + 1, stock.amount)

                if existing:
                    items = [
                        item.model_copy(update={"amount": item.amount + 1})
                        if item.id == product_id else item
                        for item in self._items
                    ]
                else:
                    product = await self.stock_client.get_product(product_id)
                    new_item = CartItem.model_validate({**product.model_dump(), "amount": 1})
                    items = [*self._items, new_item]

                result = await self._commit(items)
                logger.info(f"Added product {product_id} to cart")
                return result

            except StockUnavailableError as e:
                logger.warning(f"Add rejected: {str(e)}")
                return self._reject(CartOutcome.REJECTED_BY_POLICY, notifications.OUT_OF_STOCK)
            except Exception:
                logger.exception(f"Failed to add product {product_id}")
                return self._reject(CartOutcome.FAILED, notifications.ADD_FAILED)

    async def remove_product(self, product_id: int) -> CartMutationResult:
        async with self._lock:
            try:
                if not self._find(product_id):
                    raise CartItemNotFoundError(product_id)

                result = await self._commit([item for item in self._items if item.id != product_id])
                logger.info(f"Removed product {product_id} from cart")
                return result

            except CartItemNotFoundError as e:
                logger.warning(f"Remove rejected: {str(e)}")
                return self._reject(CartOutcome.REJECTED_BY_PRECONDITION, notifications.REMOVE_FAILED)
            except Exception:
                logger.exception(f"Failed to remove product {product_id}")
                return self._reject(CartOutcome.FAILED, notifications.REMOVE_FAILED)

    async def update_product_amount(self, product_id: int, amount: int) -> CartMutationResult:
        if amount <= 0:
            return CartMutationResult(outcome=CartOutcome.NOOP, cart=self.cart)

        async with self._lock:
            try:
                stock = await self.stock_client.get_stock(product_id)

                if amount > stock.amount:
                    raise StockUnavailableError(product_id, amount, stock.amount)
                if not self._find(product_id):
                    raise CartItemNotFoundError(product_id)

                items = [
                    item.model_copy(update={"amount": amount}) if item.id == product_id else item
                    for item in self._items
                ]
                result = await self._commit(items)
                logger.info(f"Updated product {product_id} amount to {amount}")
                return result

            except StockUnavailableError as e:
                logger.warning(f"Update rejected: {str(e)}")
                return self._reject(CartOutcome.REJECTED_BY_POLICY, notifications.OUT_OF_STOCK)
            except CartItemNotFoundError as e:
                logger.warning(f"Update rejected: {str(e)}")
                return self._reject(CartOutcome.REJECTED_BY_PRECONDITION, notifications.UPDATE_FAILED)
            except Exception:
                logger.exception(f"Failed to update product {product_id} amount to {amount}")
                return self._reject(CartOutcome.FAILED, notifications.UPDATE_FAILED)

    def summary(self) -> CartSummary:
        items = []
        total = Decimal("0.00")

        for item in self._items:
            subtotal = item.price * item.amount
            items.append(CartItemResponse(
                product_id=item.id,
                product_title=item.title,
                product_price=item.price,
                amount=item.amount,
                subtotal=subtotal
            ))
            total += subtotal

        return CartSummary(
            items=items,
            total=total,
            item_count=len(items),
            quantity=sum(item.amount for item in self._items)
        )
