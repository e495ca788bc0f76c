from fastapi import APIRouter, Depends
import logging

from app.api.dependencies import get_cart_store
from app.schemas.cart import CartItemAdd, CartItemUpdate, CartMutationResult, CartSummary
from app.services.cart import CartStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.get("", response_model=CartSummary)
async def get_cart(cart_store: CartStore = Depends(get_cart_store)):
    """Get current shopping cart with subtotals."""
    return cart_store.summary()


@router.post("/add", response_model=CartMutationResult)
async def add_to_cart(item: CartItemAdd, cart_store: CartStore = Depends(get_cart_store)):
    """Add one unit of a product to the cart."""
    return await cart_store.add_product(item.product_id)


@router.put("/update", response_model=CartMutationResult)
async def update_cart_item(item: CartItemUpdate, cart_store: CartStore = Depends(get_cart_store)):
    """
    Set the amount of a product already in the cart.
    Amounts of 0 or less are ignored.
    """
    return await cart_store.update_product_amount(item.product_id, item.amount)


@router.delete("/remove/{product_id}", response_model=CartMutationResult)
async def remove_from_cart(product_id: int, cart_store: CartStore = Depends(get_cart_store)):
    """Remove a product from the cart."""
    return await cart_store.remove_product(product_id)
