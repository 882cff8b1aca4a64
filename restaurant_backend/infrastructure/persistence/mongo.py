from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from ...domain.errors import UpstreamError
from .documents import DOCUMENT_MODELS

logger = logging.getLogger(__name__)


class MongoPersistence:
    """Owns the Motor client and the Beanie document registration."""

    def __init__(
        self,
        uri: str,
        database_name: str,
        *,
        timeout_ms: int = 5000,
        client: Optional[AsyncIOMotorClient] = None,
    ) -> None:
        if client is None:
            self._client = AsyncIOMotorClient(uri, tz_aware=True, serverSelectionTimeoutMS=timeout_ms)
            self._database = self._client.get_default_database(default=database_name)
        else:
            self._client = client
            self._database = client[database_name]
        self._ready = False
        self._lock = asyncio.Lock()

    async def connect(self) -> bool:
        async with self._lock:
            if self._ready:
                return True
            try:
                await init_beanie(database=self._database, document_models=DOCUMENT_MODELS)
            except PyMongoError as exc:
                logger.error("Error connecting to MongoDB: %s", exc)
                return False
            self._ready = True
            logger.info("Connected to MongoDB database %s", self._database.name)
            return True

    async def ensure_ready(self) -> None:
        if self._ready:
            return
        if not await self.connect():
            raise UpstreamError("Database is not available")

    async def ping(self) -> bool:
        try:
            await self._client.admin.command("ping")
        except PyMongoError:
            return False
        return True

    def close(self) -> None:
        self._client.close()
        self._ready = False
        logger.info("MongoDB connection closed.")


@contextmanager
def translate_errors(action: str) -> Iterator[None]:
    """Re-raise driver failures as ``UpstreamError``."""
    try:
        yield
    except PyMongoError as exc:
        logger.error("MongoDB failure while trying to %s: %s", action, exc)
        raise UpstreamError(f"Failed to {action}") from exc


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)
