import logging
from typing import Dict, Iterable, Optional

from termindex.core.keys import term_counter_key, url_set_key
from termindex.preprocessing.text_preprocessor import TextPreprocessor
from termindex.store.base import StoreClient

logger = logging.getLogger(__name__)


class IndexWriter:
    """
    Write path of the index.

    Each document update is a single store transaction, so readers never see
    some of a document's terms applied and others not. Different documents
    need no coordination: counter increments commute.
    """

    def __init__(self, store: StoreClient, preprocessor: Optional[TextPreprocessor] = None):
        self.store = store
        self.preprocessor = preprocessor or TextPreprocessor()

    def index_page(self, document_id: str, text_blocks: Iterable[str]) -> None:
        """
        Add a document's terms to the index.

        Counts accumulate: indexing the same document again adds to its
        existing counts. Store errors propagate; nothing is retried.

        Args:
            document_id: Unique document identifier (its location)
            text_blocks: Paragraphs or text fragments of the document
        """
        term_counts = self.preprocessor.get_word_frequencies(text_blocks)
        self.write_counts(document_id, term_counts)

    def write_counts(self, document_id: str, term_counts: Dict[str, int]) -> None:
        """
        Merge an already computed term -> count mapping in one transaction.

        Raises:
            ValueError: if any count is below 1; nothing is written
        """
        if not term_counts:
            logger.debug(f"No terms in {document_id}, nothing to index")
            return

        invalid = {term: count for term, count in term_counts.items() if count < 1}
        if invalid:
            raise ValueError(f"Term counts must be at least 1, got {invalid} for {document_id}")

        counter_key = term_counter_key(document_id)
        transaction = self.store.transaction()

        for term, count in term_counts.items():
            transaction.sadd(url_set_key(term), document_id)
            transaction.hincrby(counter_key, term, count)

        transaction.execute()
        logger.debug(f"Indexed {document_id}: {len(term_counts)} terms")

    def is_indexed(self, document_id: str) -> bool:
        """True once the document has a TermCounter in the store."""
        return self.store.exists(term_counter_key(document_id))
