import enum
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    # Extra metadata from the product API is kept as-is
    model_config = ConfigDict(extra="allow", frozen=True)

    id: int
    title: str
    price: Decimal
    image: Optional[str] = None


class CartItem(Product):
    amount: int = Field(ge=1)


class StockSnapshot(BaseModel):
    id: Optional[int] = None
    amount: int = Field(ge=0)


class CartItemAdd(BaseModel):
    product_id: int


class CartItemUpdate(BaseModel):
    product_id: int
    amount: int


class CartOutcome(str, enum.Enum):
    APPLIED = "applied"
    REJECTED_BY_POLICY = "rejected_by_policy"
    REJECTED_BY_PRECONDITION = "rejected_by_precondition"
    FAILED = "failed"
    NOOP = "noop"


class CartMutationResult(BaseModel):
    outcome: CartOutcome
    cart: List[CartItem]
    message: Optional[str] = None


class CartItemResponse(BaseModel):
    product_id: int
    product_title: str
    product_price: Decimal
    amount: int
    subtotal: Decimal


class CartSummary(BaseModel):
    items: List[CartItemResponse]
    total: Decimal
    item_count: int
    quantity: int
