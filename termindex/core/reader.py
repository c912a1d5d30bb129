import logging
from typing import Dict, Set

from termindex.core.keys import term_counter_key, url_set_key
from termindex.index_base import CountRead
from termindex.store.base import StoreClient

logger = logging.getLogger(__name__)


class IndexReader:
    """
    Read path of the index.

    Reads are not wrapped in a transaction: a document may show up in a
    URLSet slightly before or after its TermCounter reflects a concurrent
    update.
    """

    def __init__(self, store: StoreClient, count_read: CountRead = CountRead.PURE):
        self.store = store
        if isinstance(count_read, str):
            count_read = CountRead[count_read.upper()]
        self.count_read = count_read

    def get_urls(self, term: str) -> Set[str]:
        """Documents containing the term. Empty if the term was never indexed."""
        return self.store.smembers(url_set_key(term))

    def get_count(self, document_id: str, term: str) -> int:
        """
        Occurrences of a term in a document.

        With CountRead.INCREMENT this is an increment by zero, which creates
        the field (and the TermCounter key) with value 0 when absent.
        """
        key = term_counter_key(document_id)

        if self.count_read is CountRead.INCREMENT:
            return int(self.store.hincrby(key, term, 0))

        value = self.store.hget(key, term)
        return int(value) if value is not None else 0

    def get_counts(self, term: str) -> Dict[str, int]:
        """
        Document -> count for every document containing the term.

        One set read plus one lookup per matching document.
        """
        return {
            document_id: self.get_count(document_id, term)
            for document_id in self.get_urls(term)
        }
