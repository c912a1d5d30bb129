"""
Redis-backed store client using redis-py.
Transactions map onto MULTI/EXEC pipelines.
"""

import logging
from typing import Any, List, Optional, Set

import redis

from termindex.store.base import StoreClient, Transaction

logger = logging.getLogger(__name__)


class RedisTransaction(Transaction):
    """MULTI/EXEC pipeline wrapper."""

    def __init__(self, pipeline):
        self.pipeline = pipeline
        self._queued = 0

    def sadd(self, key: str, member: str) -> None:
        self.pipeline.sadd(key, member)
        self._queued += 1

    def hincrby(self, key: str, field: str, delta: int) -> None:
        self.pipeline.hincrby(key, field, delta)
        self._queued += 1

    def delete(self, key: str) -> None:
        self.pipeline.delete(key)
        self._queued += 1

    def execute(self) -> List[Any]:
        try:
            return self.pipeline.execute()
        finally:
            self.pipeline.reset()
            self._queued = 0

    def __len__(self) -> int:
        return self._queued


class RedisStore(StoreClient):
    """
    Store client over a single Redis connection pool.

    Connection and command errors (redis.exceptions.RedisError) are not
    caught here and reach the caller unchanged.
    """

    def __init__(self, client: redis.Redis):
        """
        Args:
            client: Connected redis.Redis instance. Must use decode_responses=True
                    so keys and members come back as str.
        """
        self.client = client

    @classmethod
    def from_config(cls, ds_config) -> 'RedisStore':
        """
        Build a client from a datastore config section.

        Args:
            ds_config: Hydra config node with host, port, db and optional
                       password / socket_timeout
        """
        password = ds_config.get('password') or None
        logger.info(f"Connecting to Redis at {ds_config.host}:{ds_config.port}/{ds_config.db}")

        client = redis.Redis(
            host=ds_config.host,
            port=int(ds_config.port),
            db=int(ds_config.db),
            password=password,
            socket_timeout=ds_config.get('socket_timeout'),
            decode_responses=True,
        )
        return cls(client)

    def sadd(self, key: str, member: str) -> int:
        return self.client.sadd(key, member)

    def hincrby(self, key: str, field: str, delta: int) -> int:
        return self.client.hincrby(key, field, delta)

    def hget(self, key: str, field: str) -> Optional[str]:
        return self.client.hget(key, field)

    def exists(self, key: str) -> bool:
        return self.client.exists(key) > 0

    def smembers(self, key: str) -> Set[str]:
        return set(self.client.smembers(key))

    def keys(self, pattern: str) -> Set[str]:
        return set(self.client.keys(pattern))

    def transaction(self) -> RedisTransaction:
        return RedisTransaction(self.client.pipeline(transaction=True))

    def ping(self) -> bool:
        return bool(self.client.ping())

    def close(self) -> None:
        self.client.close()
