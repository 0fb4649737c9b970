import asyncio
from types import SimpleNamespace

import pytest
from beanie import PydanticObjectId, init_beanie
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from sportspro.main import app
from sportspro.models.cartModel import Cart
from sportspro.models.equipmentModel import Equipment
from sportspro.crud.userService import current_active_user
from sportspro.commonUtils.enumUtils import EquipmentAvailability


def run_sync(coro):
    """Run a coroutine on a private loop, leaving any test loop untouched"""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def make_equipment(**overrides) -> Equipment:
    fields = {
        "name": "Nike Air Zoom Pegasus 40",
        "brand": "Nike",
        "category": "Running Shoes",
        "sport": "Running",
        "price": 130.0,
        "description": "Responsive cushioning for everyday road running.",
        "images": ["/images/nike-pegasus.jpg"],
        "stock": 10,
    }
    fields.update(overrides)
    return Equipment(**fields)


def make_user() -> SimpleNamespace:
    return SimpleNamespace(id=PydanticObjectId(), is_active=True)


@pytest.fixture
def db():
    """Fresh in-memory MongoDB with the cart and catalog collections registered"""
    client = AsyncMongoMockClient()
    run_sync(init_beanie(database=client.get_database("sportspro_test"),
                         document_models=[Equipment, Cart]))
    return client


@pytest.fixture
def catalog(db):
    items = {
        "racket": make_equipment(name="Wilson Pro Staff RF97", brand="Wilson", category="Tennis Racket",
                                 sport="Tennis", price=50.0, images=["/images/wilson-prostaff.jpg"]),
        "ball": make_equipment(name="Spalding NBA Official Basketball", brand="Spalding",
                               category="Basketball", sport="Basketball", price=30.0),
        "sold_out": make_equipment(name="Sold Out Skates", availability=EquipmentAvailability.OUT_OF_STOCK),
        "low_stock": make_equipment(name="Last Pair Cleats", stock=1),
        "pre_order": make_equipment(name="Next Season Bat", availability=EquipmentAvailability.PRE_ORDER,
                                    stock=0, price=80.0),
        "retired": make_equipment(name="Retired Helmet", is_active=False),
    }

    async def seed():
        for equipment in items.values():
            await equipment.insert()

    run_sync(seed())
    return items


@pytest.fixture
def user():
    return make_user()


@pytest.fixture
def act_as():
    """Make the API treat requests as coming from the given user"""

    def _act_as(acting_user):
        app.dependency_overrides[current_active_user] = lambda: acting_user

    yield _act_as
    app.dependency_overrides.clear()


@pytest.fixture
def test_client(db, user, act_as) -> TestClient:
    act_as(user)
    return TestClient(app)


@pytest.fixture
def anonymous_client(db) -> TestClient:
    app.dependency_overrides.clear()
    return TestClient(app)


@pytest.fixture
def run():
    return run_sync
