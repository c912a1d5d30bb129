"""Store clients backing the index."""

import logging

from .base import StoreClient, StoreError, Transaction, WrongTypeError
from .memory_store import MemoryStore
from .redis_store import RedisStore

logger = logging.getLogger(__name__)


def make_store(config) -> StoreClient:
    """
    Create the store client selected by config.datastore.name.

    Args:
        config: Hydra configuration object

    Returns:
        A connected StoreClient
    """
    name = config.datastore.name

    if name == 'redis':
        return RedisStore.from_config(config.datastore)
    elif name == 'memory':
        logger.info("Using in-memory store")
        return MemoryStore()
    else:
        raise NotImplementedError(f"Datastore {name} not yet implemented")


__all__ = [
    'StoreClient',
    'StoreError',
    'Transaction',
    'WrongTypeError',
    'MemoryStore',
    'RedisStore',
    'make_store',
]
