# catalog_api/database.py
import asyncio
import logging
from typing import Any, Awaitable, Dict, List, Optional

from bson import ObjectId
from pymongo import AsyncMongoClient
from pymongo.errors import ConnectionFailure, ExecutionTimeout

from .config import Settings
from .errors import DependencyUnavailable
from .query import ID_FIELD, QuerySpec

logger = logging.getLogger(__name__)


class ResourceStore:
    """Owns the process-wide collection handle.

    Every call is bounded by ``timeout`` seconds; timeouts and connection
    failures surface as ``DependencyUnavailable``. ``ready`` flips to True
    after the first successful ping and stays there.
    """

    def __init__(self, collection: Any, client: Optional[AsyncMongoClient] = None, timeout: float = 5.0):
        self._collection = collection
        self._client = client
        self.timeout = timeout
        self.ready = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "ResourceStore":
        client = AsyncMongoClient(
            settings.mongo_url,
            serverSelectionTimeoutMS=int(settings.store_timeout * 1000),
        )
        collection = client[settings.db_name][settings.collection_name]
        return cls(collection, client=client, timeout=settings.store_timeout)

    async def _call(self, awaitable: Awaitable) -> Any:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning("store call exceeded %.1fs", self.timeout)
            raise DependencyUnavailable("Store call timed out")
        except (ConnectionFailure, ExecutionTimeout) as e:
            logger.warning("store call failed: %s", e)
            raise DependencyUnavailable()

    # ---------------------------
    # Lifecycle
    # ---------------------------
    async def connect(self) -> None:
        await self._call(self._collection.database.command("ping"))
        if not self.ready:
            logger.info("Connected to store %s.%s", self._collection.database.name, self._collection.name)
        self.ready = True

    async def ensure_ready(self) -> None:
        if not self.ready:
            await self.connect()

    async def close(self) -> None:
        self.ready = False
        if self._client is not None:
            await self._client.close()
            logger.info("Store connection closed")

    # ---------------------------
    # Operations (one store call each)
    # ---------------------------
    async def find(self, spec: QuerySpec) -> List[Dict[str, Any]]:
        await self.ensure_ready()
        cursor = self._collection.find(spec.mongo_filter(), spec.mongo_projection())
        if spec.sort is not None:
            cursor = cursor.sort(*spec.sort)
        return await self._call(cursor.to_list(None))

    async def find_by_id(self, oid: ObjectId) -> Optional[Dict[str, Any]]:
        await self.ensure_ready()
        return await self._call(self._collection.find_one({ID_FIELD: oid}))

    async def insert(self, doc: Dict[str, Any]) -> ObjectId:
        await self.ensure_ready()
        # insert_one writes _id back into the dict it is given
        result = await self._call(self._collection.insert_one(dict(doc)))
        return result.inserted_id

    async def merge(self, oid: ObjectId, fields: Dict[str, Any]) -> bool:
        await self.ensure_ready()
        result = await self._call(self._collection.update_one({ID_FIELD: oid}, {"$set": fields}))
        return result.matched_count > 0

    async def delete(self, oid: ObjectId) -> bool:
        await self.ensure_ready()
        result = await self._call(self._collection.delete_one({ID_FIELD: oid}))
        return result.deleted_count > 0
