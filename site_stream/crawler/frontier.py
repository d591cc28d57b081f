# site_stream/crawler/frontier.py
"""
Traversal bookkeeping: the FIFO frontier and the visited ledger.
"""
from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, Iterator, Set


class Frontier:
    """FIFO queue of candidate URLs. Duplicates are allowed; dedup happens on pop."""

    def __init__(self, urls: Iterable[str] = ()) -> None:
        self._queue: Deque[str] = deque(urls)

    def push(self, url: str) -> None:
        self._queue.append(url)

    def extend(self, urls: Iterable[str]) -> None:
        self._queue.extend(urls)

    def pop(self) -> str:
        """Remove and return the oldest URL. Raises IndexError when empty."""
        return self._queue.popleft()

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)

    def __iter__(self) -> Iterator[str]:
        return iter(self._queue)


class VisitedLedger:
    """Grow-only set of URLs whose visit completed."""

    def __init__(self) -> None:
        self._urls: Set[str] = set()

    def add(self, url: str) -> None:
        self._urls.add(url)

    def __contains__(self, url: object) -> bool:
        return url in self._urls

    def __len__(self) -> int:
        return len(self._urls)

    def __iter__(self) -> Iterator[str]:
        return iter(self._urls)
