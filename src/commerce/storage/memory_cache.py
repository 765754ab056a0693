"""In-memory local cache for tests and headless use."""

import copy

from commerce.storage.port import LocalCache


class MemoryCache(LocalCache):
    def __init__(self, initial: dict[str, list[dict]] | None = None) -> None:
        self._entries: dict[str, list[dict]] = copy.deepcopy(initial or {})
        self.fail_writes: bool = False
        self.writes: list[str] = []

    def configure(self, fail_writes: bool) -> None:
        self.fail_writes = fail_writes

    def read(self, key: str) -> list[dict]:
        return copy.deepcopy(self._entries.get(key, []))

    def write(self, key: str, rows: list[dict]) -> None:
        if self.fail_writes:
            raise OSError("local cache is full")
        self.writes.append(key)
        self._entries[key] = copy.deepcopy(rows)
