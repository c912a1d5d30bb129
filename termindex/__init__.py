"""
termindex - inverted term index kept in a key-value store.
"""

from .index_base import IndexBase, DataStore, CountRead
from .indices import TermIndex, init_index
from .store import StoreClient, MemoryStore, RedisStore, make_store

__all__ = [
    'IndexBase',
    'DataStore',
    'CountRead',
    'TermIndex',
    'init_index',
    'StoreClient',
    'MemoryStore',
    'RedisStore',
    'make_store',
]
