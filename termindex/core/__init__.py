"""
Core index operations over a StoreClient.
"""

from .keys import url_set_key, term_counter_key, term_from_key, document_from_key
from .writer import IndexWriter
from .reader import IndexReader
from .admin import AdminOps

__all__ = [
    'url_set_key',
    'term_counter_key',
    'term_from_key',
    'document_from_key',

    'IndexWriter',
    'IndexReader',
    'AdminOps',
]
