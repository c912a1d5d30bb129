"""
In-process store client.

Mirrors the subset of Redis semantics the index relies on: sets and hashes
keyed by string, empty containers vanish, hash values read back as strings,
and a transaction either applies completely or not at all.
"""

import copy
import fnmatch
import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from termindex.store.base import StoreClient, Transaction, WrongTypeError

logger = logging.getLogger(__name__)


def _typed(space: Dict[str, Any], key: str, kind: type) -> Any:
    value = space.get(key)
    if value is not None and not isinstance(value, kind):
        raise WrongTypeError(
            f"Operation against key '{key}' holding a {type(value).__name__}, expected {kind.__name__}"
        )
    return value


def _sadd(space: Dict[str, Any], key: str, member: str) -> int:
    members = _typed(space, key, set)
    if members is None:
        members = space[key] = set()
    if member in members:
        return 0
    members.add(member)
    return 1


def _hincrby(space: Dict[str, Any], key: str, field: str, delta: int) -> int:
    fields = _typed(space, key, dict)
    if fields is None:
        fields = space[key] = {}
    fields[field] = fields.get(field, 0) + int(delta)
    return fields[field]


def _delete(space: Dict[str, Any], key: str) -> int:
    return 1 if space.pop(key, None) is not None else 0


class MemoryTransaction(Transaction):
    """Commands queued against a MemoryStore."""

    def __init__(self, store: 'MemoryStore'):
        self.store = store
        self.commands: List[Tuple[Callable, Tuple]] = []

    def sadd(self, key: str, member: str) -> None:
        self.commands.append((_sadd, (key, member)))

    def hincrby(self, key: str, field: str, delta: int) -> None:
        self.commands.append((_hincrby, (key, field, delta)))

    def delete(self, key: str) -> None:
        self.commands.append((_delete, (key,)))

    def execute(self) -> List[Any]:
        commands, self.commands = self.commands, []
        return self.store._execute(commands)

    def __len__(self) -> int:
        return len(self.commands)


class MemoryStore(StoreClient):
    """
    Thread-safe dictionary-backed store.

    Every command, and every transaction as a whole, runs under one lock, so
    concurrent callers never observe a partially applied transaction.
    """

    def __init__(self):
        self._data: Dict[str, Any] = {}
        self._lock = threading.RLock()

    def _execute(self, commands: List[Tuple[Callable, Tuple]]) -> List[Any]:
        touched = {args[0] for _, args in commands}
        with self._lock:
            # Stage the touched keys so a failing command leaves the store as it was
            staged = {k: copy.deepcopy(self._data[k]) for k in touched if k in self._data}
            results = [func(staged, *args) for func, args in commands]

            for key in touched:
                if key in staged:
                    self._data[key] = staged[key]
                else:
                    self._data.pop(key, None)

        logger.debug(f"Committed transaction of {len(commands)} commands")
        return results

    def sadd(self, key: str, member: str) -> int:
        with self._lock:
            return _sadd(self._data, key, member)

    def hincrby(self, key: str, field: str, delta: int) -> int:
        with self._lock:
            return _hincrby(self._data, key, field, delta)

    def hget(self, key: str, field: str) -> Optional[str]:
        with self._lock:
            fields = _typed(self._data, key, dict)
            if fields is None or field not in fields:
                return None
            return str(fields[field])

    def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def smembers(self, key: str) -> Set[str]:
        with self._lock:
            members = _typed(self._data, key, set)
            return set(members) if members else set()

    def keys(self, pattern: str) -> Set[str]:
        with self._lock:
            return {k for k in self._data if fnmatch.fnmatchcase(k, pattern)}

    def transaction(self) -> MemoryTransaction:
        return MemoryTransaction(self)

    def ping(self) -> bool:
        return True

    def flush(self) -> None:
        """Drop every key."""
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
