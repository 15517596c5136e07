import copy
import logging
from pathlib import Path
from typing import Any, Protocol

from common.jsonio import atomic_write_json, load_json, remove_json

logger = logging.getLogger(__name__)


class BlobStore(Protocol):
    def get(self, key: str) -> Any | None: ...

    def put(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...


class JsonFileBlobStore:
    """One ``<key>.json`` file per key under ``root``."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def path_for(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def get(self, key: str) -> Any | None:
        path = self.path_for(key)
        data = load_json(path)
        if data is None and path.exists():
            logger.error(f"Could not decode {path}, treating it as empty")
        return data

    def put(self, key: str, value: Any) -> None:
        atomic_write_json(self.path_for(key), value)

    def delete(self, key: str) -> None:
        remove_json(self.path_for(key))


class MemoryBlobStore:
    def __init__(self):
        self._blobs: dict[str, Any] = {}

    def get(self, key: str) -> Any | None:
        value = self._blobs.get(key)
        return copy.deepcopy(value) if value is not None else None

    def put(self, key: str, value: Any) -> None:
        self._blobs[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self._blobs.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._blobs
