"""
Maintenance and diagnostics over the two key families.

Should be used for development and testing, not production: every
operation here scans the whole keyspace, and bulk deletes are not atomic
with their scan, so keys written between the two survive. Only safe with no
concurrent writers.
"""

import logging
from typing import Dict, Set

from termindex.core.keys import (
    ALL_KEYS_PATTERN,
    DELIMITER,
    TERM_COUNTER_PATTERN,
    URL_SET_PATTERN,
    document_from_key,
    term_from_key,
)
from termindex.core.reader import IndexReader
from termindex.store.base import StoreClient

logger = logging.getLogger(__name__)


class AdminOps:
    """Enumeration and bulk deletion of index keys."""

    def __init__(self, store: StoreClient, reader: IndexReader):
        self.store = store
        self.reader = reader

    def url_set_keys(self) -> Set[str]:
        return self.store.keys(URL_SET_PATTERN)

    def term_counter_keys(self) -> Set[str]:
        return self.store.keys(TERM_COUNTER_PATTERN)

    def term_set(self) -> Set[str]:
        """
        Terms that have been indexed, parsed out of URLSet key names.

        A term containing the delimiter comes back truncated at it.
        """
        terms = set()
        for key in self.url_set_keys():
            if key.count(DELIMITER) > 1:
                logger.warning(f"Ambiguous key {key!r}: term contains '{DELIMITER}' and will be truncated")
            terms.add(term_from_key(key))
        return terms

    def indexed_documents(self) -> Set[str]:
        """Document ids that have a TermCounter."""
        return {document_from_key(key) for key in self.term_counter_keys()}

    def dump_index(self) -> Dict[str, Dict[str, int]]:
        """Term -> document -> count for the whole index."""
        return {term: self.reader.get_counts(term) for term in self.term_set()}

    def print_index(self) -> None:
        """Print every term followed by its documents and counts."""
        for term, counts in sorted(self.dump_index().items()):
            print(term)
            for document_id, count in sorted(counts.items()):
                print(f"    {document_id} {count}")

    def delete_url_sets(self) -> int:
        return self._delete_keys(self.url_set_keys())

    def delete_term_counters(self) -> int:
        return self._delete_keys(self.term_counter_keys())

    def delete_all_keys(self) -> int:
        """Deletes every key in the store, index or not."""
        return self._delete_keys(self.store.keys(ALL_KEYS_PATTERN))

    def _delete_keys(self, keys: Set[str]) -> int:
        if not keys:
            return 0

        transaction = self.store.transaction()
        for key in keys:
            transaction.delete(key)
        transaction.execute()

        logger.info(f"Deleted {len(keys)} keys")
        return len(keys)
