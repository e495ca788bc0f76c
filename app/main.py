import logging
from fastapi import FastAPI

from app.core.config import settings
from app.core.notifications import LoggingNotifier
from app.core.stock_client import stock_client
from app.db.session import async_session, engine, init_db
from app.services.cart import CartStore
from app.services.storage import CartStorage
from app.api import cart

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=f"{settings.SHOP_NAME} - Cart",
    description="Shopping cart validated against the stock API",
    version="1.0.0",
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

# Include API routers
app.include_router(cart.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    cart_store = getattr(app.state, "cart_store", None)
    return {
        "status": "ok",
        "shop_name": settings.SHOP_NAME,
        "cart_items": len(cart_store.cart) if cart_store else 0
    }


@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting {settings.SHOP_NAME} cart, stock API at {settings.STOCK_API_BASE_URL}")
    await init_db()
    cart_store = CartStore(
        stock_client=stock_client,
        storage=CartStorage(async_session, settings.CART_STORAGE_KEY),
        notifier=LoggingNotifier()
    )
    # A corrupt stored cart aborts startup
    await cart_store.load()
    app.state.cart_store = cart_store


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down cart application")
    await stock_client.close()
    await engine.dispose()
