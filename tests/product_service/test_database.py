"""
Tests for the MongoDB product store
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from bson import ObjectId
from pymongo import ASCENDING
from pymongo.errors import ServerSelectionTimeoutError

from product_service.models.product import ProductCreate
from product_service.utils.database import ProductStore


@pytest.fixture
def mock_client():
    """Mock motor client with one collection"""
    client = MagicMock()
    client.admin.command = AsyncMock(return_value={"ok": 1})
    collection = MagicMock()
    collection.create_index = AsyncMock(return_value="created_at_1")
    collection.insert_one = AsyncMock()
    client.__getitem__.return_value.__getitem__.return_value = collection
    return client, collection


@pytest.fixture
def store(mock_client):
    client, _ = mock_client
    store = ProductStore("mongodb://mongo.test:27017", "test_ecommerce", "products", timeout_ms=100)
    with patch.object(ProductStore, "_create_client", return_value=client):
        yield store


async def test_connect_pings_and_indexes(store, mock_client):
    client, collection = mock_client

    await store.connect()

    client.admin.command.assert_awaited_once_with("ping")
    collection.create_index.assert_awaited_once_with([("created_at", ASCENDING)])
    assert store.client is client


async def test_connect_failure_raises_and_closes(store, mock_client):
    client, _ = mock_client
    client.admin.command.side_effect = ServerSelectionTimeoutError("no servers")

    with pytest.raises(ServerSelectionTimeoutError):
        await store.connect()

    client.close.assert_called_once()
    assert store.client is None


async def test_close(store, mock_client):
    client, _ = mock_client
    await store.connect()

    await store.close()

    client.close.assert_called_once()
    assert store.client is None


async def test_collection_requires_connection():
    store = ProductStore("mongodb://mongo.test:27017", "test_ecommerce")

    with pytest.raises(RuntimeError):
        store.collection


async def test_ping(store, mock_client):
    client, _ = mock_client
    assert await store.ping() is False

    await store.connect()
    assert await store.ping() is True

    client.admin.command.side_effect = ServerSelectionTimeoutError("no servers")
    assert await store.ping() is False


async def test_create_product(store, mock_client):
    _, collection = mock_client
    oid = ObjectId()
    collection.insert_one.return_value = MagicMock(inserted_id=oid)
    await store.connect()

    product = await store.create_product(ProductCreate(name="Test Product", price=99.99))

    document = collection.insert_one.await_args.args[0]
    assert document["name"] == "Test Product"
    assert document["price"] == 99.99
    assert document["created_at"].tzinfo is not None
    assert product.id == str(oid)
    assert product.name == "Test Product"
    assert product.price == 99.99


async def test_list_products(store, mock_client):
    _, collection = mock_client
    created = datetime(2024, 5, 1, tzinfo=timezone.utc)
    documents = [
        {"_id": ObjectId(), "name": "Lamp", "price": 10.0, "created_at": created},
        {"_id": ObjectId(), "name": "Desk", "price": 150.0, "created_at": created},
    ]
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(return_value=documents)
    collection.find.return_value = cursor
    await store.connect()

    products = await store.list_products()

    collection.find.assert_called_once_with({})
    cursor.sort.assert_called_once_with([("created_at", ASCENDING), ("_id", ASCENDING)])
    assert [p.name for p in products] == ["Lamp", "Desk"]
    assert products[0].id == str(documents[0]["_id"])
