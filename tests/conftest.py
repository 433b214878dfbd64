"""
Pytest fixtures shared by the gateway and product service tests
"""

from datetime import datetime, timezone
from typing import Dict, List

import httpx
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from gateway.config import Settings as GatewaySettings
from gateway.main import create_app as create_gateway_app
from product_service.config import Settings as ProductSettings
from product_service.main import create_app as create_product_app
from product_service.models.product import Product, ProductCreate


class InMemoryProductStore:
    """Product store test double keeping documents in a list"""

    def __init__(self):
        self.documents: List[Dict] = []
        self.available = True
        self.connected = False

    async def connect(self):
        self.connected = True

    async def close(self):
        self.connected = False

    async def ping(self) -> bool:
        return self.available

    async def list_products(self) -> List[Product]:
        return [Product.from_document(doc) for doc in self.documents]

    async def create_product(self, product_data: ProductCreate) -> Product:
        document = {
            "_id": ObjectId(),
            "name": product_data.name,
            "price": product_data.price,
            "created_at": datetime.now(timezone.utc),
        }
        self.documents.append(document)
        return Product.from_document(document)


@pytest.fixture
def gateway_settings() -> GatewaySettings:
    return GatewaySettings(
        backend_url="http://backend.test:3000",
        backend_timeout=2.0,
        backend_connect_timeout=1.0,
        log_level="WARNING",
        _env_file=None,
    )


@pytest.fixture
def product_settings() -> ProductSettings:
    return ProductSettings(
        mongo_url="mongodb://mongo.test:27017",
        mongo_database="test_ecommerce",
        log_level="WARNING",
        _env_file=None,
    )


@pytest.fixture
def product_store() -> InMemoryProductStore:
    return InMemoryProductStore()


@pytest.fixture
def product_app(product_settings, product_store):
    return create_product_app(product_settings, store=product_store)


@pytest.fixture
def product_client(product_app):
    with TestClient(product_app) as client:
        yield client


@pytest.fixture
def stack_client(gateway_settings, product_app):
    """Gateway client whose backend is the product service app in process"""
    transport = httpx.ASGITransport(app=product_app)
    app = create_gateway_app(gateway_settings, transport=transport)
    with TestClient(app) as client:
        yield client
