import json
from typing import List, Sequence

from pydantic import TypeAdapter, ValidationError

from app.core.exceptions import CorruptCartError
from app.schemas.cart import CartItem

_cart_adapter = TypeAdapter(List[CartItem])


def encode_cart(items: Sequence[CartItem]) -> str:
    return json.dumps([item.model_dump(mode="json") for item in items])


def decode_cart(text: str) -> List[CartItem]:
    """
    Decode a persisted cart.

    Raises CorruptCartError instead of returning an empty cart, so a damaged
    slot is never silently overwritten.
    """
    try:
        data = json.loads(text)
    except ValueError as e:
        raise CorruptCartError(f"Stored cart is not valid JSON: {str(e)}") from e

    if not isinstance(data, list):
        raise CorruptCartError(f"Stored cart must be a list, got {type(data).__name__}")

    try:
        items = _cart_adapter.validate_python(data)
    except ValidationError as e:
        raise CorruptCartError(f"Stored cart has invalid items: {str(e)}") from e

    ids = [item.id for item in items]
    if len(ids) != len(set(ids)):
        raise CorruptCartError("Stored cart has duplicate product ids")

    return items
