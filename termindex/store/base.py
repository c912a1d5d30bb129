from abc import ABC, abstractmethod
from typing import Any, List, Optional, Set


class StoreError(Exception):
    """Base error raised by store implementations."""


class WrongTypeError(StoreError):
    """Operation against a key holding the wrong kind of value."""


class Transaction(ABC):
    """
    A queued batch of store commands applied all-or-nothing.

    Commands are only recorded when queued; nothing reaches the store until
    execute() is called.
    """

    @abstractmethod
    def sadd(self, key: str, member: str) -> None:
        """Queue an idempotent set insertion."""
        pass

    @abstractmethod
    def hincrby(self, key: str, field: str, delta: int) -> None:
        """Queue a hash field increment."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Queue removal of a key."""
        pass

    @abstractmethod
    def execute(self) -> List[Any]:
        """
        Apply every queued command atomically.

        Returns:
            One result per queued command, in queue order.
        """
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass


class StoreClient(ABC):
    """
    Capability set the index needs from a key-value store.

    Sample usage:
        store = MemoryStore()
        tx = store.transaction()
        tx.sadd("URLSet:cat", "d1")
        tx.hincrby("TermCounter:d1", "cat", 1)
        tx.execute()
    """

    @abstractmethod
    def sadd(self, key: str, member: str) -> int:
        """
        Add a member to a set.

        Returns:
            1 if the member was added, 0 if it was already present
        """
        pass

    @abstractmethod
    def hincrby(self, key: str, field: str, delta: int) -> int:
        """
        Increment a hash field, creating key and field at 0 if absent.

        Returns:
            The new value of the field
        """
        pass

    @abstractmethod
    def hget(self, key: str, field: str) -> Optional[str]:
        """Read a hash field without side effects. None if absent."""
        pass

    @abstractmethod
    def exists(self, key: str) -> bool:
        pass

    @abstractmethod
    def smembers(self, key: str) -> Set[str]:
        """Full set read. Missing keys read as the empty set."""
        pass

    @abstractmethod
    def keys(self, pattern: str) -> Set[str]:
        """
        Glob-style scan over the whole keyspace.

        O(keyspace size); for diagnostics and maintenance only.
        """
        pass

    @abstractmethod
    def transaction(self) -> Transaction:
        """Begin a new transaction."""
        pass

    @abstractmethod
    def ping(self) -> bool:
        pass

    def close(self) -> None:
        """Release any underlying connection."""
        pass
