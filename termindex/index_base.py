from abc import ABC, abstractmethod
from typing import Dict, Iterable, Set
from enum import Enum

# Identifier enums for variants of the index
class DataStore(Enum):
    REDIS = 'R'
    MEMORY = 'M'
    CUSTOM = 'C'

class CountRead(Enum):
    PURE = 'P'
    INCREMENT = 'I'


class IndexBase(ABC):
    """
    Base index class with abstract methods to inherit for specific implementations.
    """
    def __init__(self, core, dstore, count_read):
        """
        Initialize index identifiers.

        Sample usage:
            idx = TermIndex(MemoryStore())
            print(idx)

        Args:
            core: Core index type ('TermIndex')
            dstore: Datastore type (REDIS, MEMORY, CUSTOM)
            count_read: How counts are read (PURE, INCREMENT)
        """
        assert core == 'TermIndex', f"Invalid core: {core}"

        # Convert string to enum if needed
        if isinstance(dstore, str):
            dstore = DataStore[dstore]
        if isinstance(count_read, str):
            count_read = CountRead[count_read.upper()]

        self.dstore = dstore
        self.count_read = count_read

        long = [dstore, count_read]
        short = [k.value for k in long]

        self.identifier_long = "core={}|datastore={}|count_read={}".format(
            *[core] + long
        )
        self.identifier_short = "{}_d{}c{}".format(*[core] + short)

    def __repr__(self):
        return f"{self.identifier_short}: {self.identifier_long}"

    @abstractmethod
    def index_page(self, document_id: str, text_blocks: Iterable[str]) -> None:
        """
        Adds a document to the index in one atomic store transaction.

        Args:
            document_id: The unique identifier (location) of the document.
            text_blocks: An iterable of the document's text blocks.
        """
        pass

    @abstractmethod
    def is_indexed(self, document_id: str) -> bool:
        """Whether the document has been indexed at all."""
        pass

    @abstractmethod
    def get_urls(self, term: str) -> Set[str]:
        """
        Looks up a term.

        Returns:
            The set of document ids containing the term.
        """
        pass

    @abstractmethod
    def get_count(self, document_id: str, term: str) -> int:
        """Returns the number of times the term appears in the document."""
        pass

    @abstractmethod
    def get_counts(self, term: str) -> Dict[str, int]:
        """
        Looks up a term.

        Returns:
            A mapping from document id to the term's count in that document.
        """
        pass

    @abstractmethod
    def term_set(self) -> Set[str]:
        """Returns the set of indexed terms. Diagnostic use only."""
        pass

    @abstractmethod
    def url_set_keys(self) -> Set[str]:
        pass

    @abstractmethod
    def term_counter_keys(self) -> Set[str]:
        pass

    @abstractmethod
    def delete_url_sets(self) -> int:
        """Deletes all URLSet keys. Returns the number deleted."""
        pass

    @abstractmethod
    def delete_term_counters(self) -> int:
        """Deletes all TermCounter keys."""
        pass

    @abstractmethod
    def delete_all_keys(self) -> int:
        """Deletes every key in the backing store."""
        pass

    @abstractmethod
    def list_indexed_files(self) -> Iterable[str]:
        """
        Lists all documents in the index.

        Returns:
            An iterable (list-like object) of document ids.
        """
        pass
