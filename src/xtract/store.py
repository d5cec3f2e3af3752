"""Thread-safe append-only store for extracted records."""

from __future__ import annotations

import threading
from typing import Generic, Iterable, Iterator, List, TypeVar

T = TypeVar("T")


class ExtractionStore(Generic[T]):
    """Accumulates every record an engine produces; entries are never removed."""

    def __init__(self) -> None:
        self._records: List[T] = []
        self._lock = threading.Lock()

    def add(self, record: T) -> T:
        with self._lock:
            self._records.append(record)
        return record

    def extend(self, records: Iterable[T]) -> List[T]:
        batch = list(records)
        with self._lock:
            self._records.extend(batch)
        return batch

    def snapshot(self) -> List[T]:
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __iter__(self) -> Iterator[T]:
        return iter(self.snapshot())


__all__ = ["ExtractionStore"]
