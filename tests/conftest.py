import httpx
import pytest
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from app.core.stock_client import StockClient
from app.db.base import Base
from app.db import models  # noqa: F401
from app.services.cart import CartStore
from app.services.cart_codec import encode_cart
from app.services.storage import CartStorage
from app.schemas.cart import CartItem


CART_KEY = "@RocketShoes:cart"


class FakeStockApi:
    """In-memory stand-in for the stock/product API, served through httpx.MockTransport."""

    def __init__(self):
        self.stock = {}
        self.products = {}
        self.requests = []
        self.error = None
        self.status_code = None

    def add_product(self, product_id: int, amount: int, **details):
        self.stock[product_id] = amount
        self.products[product_id] = {
            "id": product_id,
            "title": details.get("title", f"Tênis {product_id}"),
            "price": details.get("price", 179.9),
            "image": details.get("image", f"https://example.com/shoes/{product_id}.jpg"),
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request.url.path)
        if self.error is not None:
            raise self.error
        if self.status_code is not None:
            return httpx.Response(self.status_code, json={"message": "error"})

        kind, product_id = request.url.path.strip("/").split("/")
        product_id = int(product_id)
        if kind == "stock" and product_id in self.stock:
            return httpx.Response(200, json={"id": product_id, "amount": self.stock[product_id]})
        if kind == "products" and product_id in self.products:
            return httpx.Response(200, json=self.products[product_id])
        return httpx.Response(404, json={})


class RecordingNotifier:
    def __init__(self):
        self.messages = []

    def notify_error(self, message: str) -> None:
        self.messages.append(message)


def make_item(product_id: int, amount: int, price: str = "179.90") -> CartItem:
    return CartItem(
        id=product_id,
        title=f"Tênis {product_id}",
        price=price,
        image=f"https://example.com/shoes/{product_id}.jpg",
        amount=amount
    )


def dump(items):
    return [item.model_dump(mode="json") for item in items]


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/cart.db", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def storage(session_factory):
    return CartStorage(session_factory, CART_KEY)


@pytest.fixture
def stock_api():
    return FakeStockApi()


@pytest.fixture
async def stock_client(stock_api):
    client = StockClient(
        base_url="http://stock.test",
        timeout=1.0,
        transport=httpx.MockTransport(stock_api.handler)
    )
    yield client
    await client.close()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
async def cart_store(stock_client, storage, notifier):
    store = CartStore(stock_client=stock_client, storage=storage, notifier=notifier)
    await store.load()
    return store


@pytest.fixture
def seed_cart(cart_store, storage):
    """Write items to storage and reload the store from it."""
    async def _seed(*items):
        await storage.set(encode_cart(items))
        await cart_store.load()
        return cart_store
    return _seed
