"""
MongoDB store for the product service
"""

from datetime import datetime, timezone
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo import ASCENDING

from product_service.models.product import Product, ProductCreate
from shared.utils.logger import get_logger

logger = get_logger(__name__)


class ProductStore:
    """Connection and operations for the products collection"""

    def __init__(
        self,
        mongo_url: str,
        database: str,
        collection: str = "products",
        timeout_ms: int = 5000,
    ):
        self.mongo_url = mongo_url
        self.database_name = database
        self.collection_name = collection
        self.timeout_ms = timeout_ms
        self.client: Optional[AsyncIOMotorClient] = None

    @property
    def collection(self) -> AsyncIOMotorCollection:
        if self.client is None:
            raise RuntimeError("Product store not connected")
        return self.client[self.database_name][self.collection_name]

    def _create_client(self) -> AsyncIOMotorClient:
        return AsyncIOMotorClient(
            self.mongo_url,
            serverSelectionTimeoutMS=self.timeout_ms,
            connectTimeoutMS=self.timeout_ms,
            tz_aware=True,
        )

    async def connect(self):
        """Open the client and verify the server answers"""
        self.client = self._create_client()
        try:
            await self.client.admin.command("ping")
            await self.collection.create_index([("created_at", ASCENDING)])
        except Exception as e:
            logger.error("Failed to connect to MongoDB", database=self.database_name, error=str(e))
            self.client.close()
            self.client = None
            raise
        logger.info(
            "MongoDB connection established",
            database=self.database_name,
            collection=self.collection_name,
        )

    async def close(self):
        """Close the client"""
        if self.client is not None:
            self.client.close()
            self.client = None
            logger.info("MongoDB connection closed")

    async def ping(self) -> bool:
        """Return True when the server answers a ping"""
        if self.client is None:
            return False
        try:
            await self.client.admin.command("ping")
            return True
        except Exception as e:
            logger.warning("MongoDB ping failed", error=str(e))
            return False

    # ===== PRODUCT OPERATIONS =====

    async def list_products(self) -> List[Product]:
        """List all products in creation order"""
        cursor = self.collection.find({}).sort([("created_at", ASCENDING), ("_id", ASCENDING)])
        documents = await cursor.to_list(length=None)
        return [Product.from_document(doc) for doc in documents]

    async def create_product(self, product_data: ProductCreate) -> Product:
        """Insert one product and return it with its assigned identifier"""
        document = {
            "name": product_data.name,
            "price": product_data.price,
            "created_at": datetime.now(timezone.utc),
        }
        result = await self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        logger.info("Product created", product_id=str(result.inserted_id), name=product_data.name)
        return Product.from_document(document)
