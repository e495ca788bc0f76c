from fastapi import HTTPException, Request, status

from app.services.cart import CartStore


def get_cart_store(request: Request) -> CartStore:
    """
    Dependency returning the cart store created at startup.
    """
    cart_store = getattr(request.app.state, "cart_store", None)
    if cart_store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Cart is not initialized"
        )
    return cart_store
