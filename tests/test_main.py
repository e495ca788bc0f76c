import pytest

from app import main
from app.core.exceptions import CorruptCartError
from app.services.cart import CartStore
from app.services.cart_codec import encode_cart

from conftest import CART_KEY, make_item


@pytest.fixture
def app_wiring(monkeypatch, session_factory, stock_client):
    """Point the app's startup/shutdown hooks at the test database and stock API."""
    async def init_db():
        pass

    monkeypatch.setattr(main, "async_session", session_factory)
    monkeypatch.setattr(main, "stock_client", stock_client)
    monkeypatch.setattr(main, "init_db", init_db)
    monkeypatch.setattr(main.settings, "CART_STORAGE_KEY", CART_KEY)
    yield main
    if getattr(main.app.state, "cart_store", None) is not None:
        del main.app.state.cart_store


@pytest.mark.asyncio
async def test_startup_loads_stored_cart(app_wiring, storage):
    await storage.set(encode_cart([make_item(1, 2), make_item(2, 1)]))

    await app_wiring.startup_event()

    cart_store = app_wiring.app.state.cart_store
    assert isinstance(cart_store, CartStore)
    assert [(item.id, item.amount) for item in cart_store.cart] == [(1, 2), (2, 1)]


@pytest.mark.asyncio
async def test_startup_with_empty_storage(app_wiring):
    await app_wiring.startup_event()

    assert app_wiring.app.state.cart_store.cart == []


@pytest.mark.asyncio
async def test_startup_fails_on_corrupt_cart(app_wiring, storage):
    await storage.set("{broken")

    with pytest.raises(CorruptCartError):
        await app_wiring.startup_event()

    assert getattr(app_wiring.app.state, "cart_store", None) is None
    assert await storage.get() == "{broken"


@pytest.mark.asyncio
async def test_shutdown_closes_stock_client(app_wiring, monkeypatch, engine, stock_client, stock_api):
    monkeypatch.setattr(main, "engine", engine)
    stock_api.add_product(1, amount=3)
    await stock_client.get_stock(1)
    assert stock_client.client is not None

    await app_wiring.shutdown_event()

    assert stock_client.client is None
