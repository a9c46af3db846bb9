# frontend/history.py

from .model import JobResult


class ResultHistory:
    """In-memory, most-recent-first list of finished jobs. Lost on restart."""

    def __init__(self):
        self._items: list[JobResult] = []

    def prepend(self, result: JobResult) -> None:
        self._items.insert(0, result)

    def clear(self) -> None:
        # swap in a fresh list so readers never see a half-cleared one
        self._items = []

    def list(self) -> list[JobResult]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self.list())
