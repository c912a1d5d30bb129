"""
TermIndex: inverted index kept in a key-value store.

Integrates the write path, read path and maintenance operations over one
shared store handle and implements the IndexBase interface.
"""

import logging
from typing import Dict, Iterable, List, Set, Union

from termindex.index_base import IndexBase, CountRead
from termindex.core import IndexWriter, IndexReader, AdminOps
from termindex.store import MemoryStore, RedisStore, StoreClient, make_store

logger = logging.getLogger(__name__)


class TermIndex(IndexBase):
    """
    Store-backed inverted index.

    Two key families are maintained:
    - URLSet:<term>           documents containing the term
    - TermCounter:<document>  term -> occurrence count for the document

    After every committed index_page call, a document is in URLSet(t)
    exactly when its TermCounter has t with a count of at least 1.
    """

    def __init__(self, store: StoreClient, count_read: Union[str, CountRead] = CountRead.PURE):
        """
        Initialize TermIndex over an existing store handle.

        Args:
            store: Store client shared by all operations
            count_read: PURE reads counts without side effects; INCREMENT
                        reads by incrementing by zero
        """
        super().__init__(
            core='TermIndex',
            dstore=self._datastore_of(store),
            count_read=count_read
        )

        self.store = store
        self.writer = IndexWriter(store)
        self.reader = IndexReader(store, self.count_read)
        self.admin = AdminOps(store, self.reader)

        logger.info(f"Initialized {self.identifier_long}")

    @classmethod
    def from_config(cls, config) -> 'TermIndex':
        """
        Build the store described by config.datastore and wrap it.

        Args:
            config: Hydra configuration object
        """
        count_read = config.index.get('count_read', 'PURE') or 'PURE'
        return cls(make_store(config), count_read=count_read)

    @staticmethod
    def _datastore_of(store: StoreClient) -> str:
        if isinstance(store, RedisStore):
            return 'REDIS'
        elif isinstance(store, MemoryStore):
            return 'MEMORY'
        return 'CUSTOM'

    # Write path

    def index_page(self, document_id: str, text_blocks: Iterable[str]) -> None:
        self.writer.index_page(document_id, text_blocks)

    def is_indexed(self, document_id: str) -> bool:
        return self.writer.is_indexed(document_id)

    # Read path

    def get_urls(self, term: str) -> Set[str]:
        return self.reader.get_urls(term)

    def get_count(self, document_id: str, term: str) -> int:
        return self.reader.get_count(document_id, term)

    def get_counts(self, term: str) -> Dict[str, int]:
        return self.reader.get_counts(term)

    # Maintenance

    def term_set(self) -> Set[str]:
        return self.admin.term_set()

    def url_set_keys(self) -> Set[str]:
        return self.admin.url_set_keys()

    def term_counter_keys(self) -> Set[str]:
        return self.admin.term_counter_keys()

    def delete_url_sets(self) -> int:
        return self.admin.delete_url_sets()

    def delete_term_counters(self) -> int:
        return self.admin.delete_term_counters()

    def delete_all_keys(self) -> int:
        return self.admin.delete_all_keys()

    def list_indexed_files(self) -> List[str]:
        return sorted(self.admin.indexed_documents())

    def dump_index(self) -> Dict[str, Dict[str, int]]:
        return self.admin.dump_index()

    def print_index(self) -> None:
        self.admin.print_index()

    def close(self) -> None:
        self.store.close()


def init_index(store: StoreClient, count_read: Union[str, CountRead] = CountRead.PURE) -> TermIndex:
    """
    Create an index bound to the given store handle.

    Sample usage:
        index = init_index(MemoryStore())
        index.index_page("d1", ["The cat sat."])
        index.get_counts("cat")   # {'d1': 1}
    """
    return TermIndex(store, count_read=count_read)
