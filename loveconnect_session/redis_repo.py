from __future__ import annotations

import logging
from typing import Optional

import redis.asyncio as redis
from pydantic import ValidationError

from .models import Identity

logger = logging.getLogger(__name__)


class SnapshotRepo:
    """Last known Identity, kept for display only."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        key: str = "user",
        ttl_sec: int = 0,
        client: Optional[redis.Redis] = None,
    ):
        self.r = client if client is not None else redis.Redis(host=host, port=port, db=db, decode_responses=True)
        self.key = key
        self.ttl = ttl_sec

    async def set(self, identity: Identity) -> None:
        raw = identity.model_dump_json(by_alias=True, exclude_none=True)
        await self.r.set(self.key, raw, ex=self.ttl or None)

    async def get(self) -> Optional[Identity]:
        raw = await self.r.get(self.key)
        if not raw:
            return None
        try:
            return Identity.model_validate_json(raw)
        except ValidationError:
            logger.warning("snapshot %r is corrupt, ignoring", self.key)
            return None

    async def delete(self) -> None:
        await self.r.delete(self.key)

    async def aclose(self) -> None:
        await self.r.aclose()
