"""File-backed SaveStore: one JSON file per key under saves/."""

from pathlib import Path

from .core import saves_dir, slugify


class FileSaveStore:
    """Stores opaque save blobs as saves/<key>.json."""

    def _path(self, key: str) -> Path:
        return saves_dir() / f"{slugify(key)}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.is_file():
            return None
        return path.read_text()

    def set(self, key: str, value: str) -> None:
        self._path(key).write_text(value)

    def has(self, key: str) -> bool:
        return self._path(key).is_file()

    def remove(self, key: str) -> None:
        path = self._path(key)
        if path.is_file():
            path.unlink()
