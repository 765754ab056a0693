"""Local cache that keeps one JSON file per key in a directory."""

import json
import os
import tempfile
from pathlib import Path

import structlog

from commerce.storage.port import LocalCache

logger = structlog.get_logger(__name__)


class JsonFileCache(LocalCache):
    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> list[dict]:
        path = self._path(key)
        if not path.exists():
            return []
        try:
            rows = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Unreadable cache entry ignored", key=key, path=str(path))
            return []
        if not isinstance(rows, list):
            logger.warning("Cache entry is not a list, ignored", key=key, path=str(path))
            return []
        return rows

    def write(self, key: str, rows: list[dict]) -> None:
        # Replace atomically so a crash never leaves half a file behind
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(rows, handle, ensure_ascii=False)
            os.replace(tmp_path, self._path(key))
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise
