"""
File store infrastructure for repoprov.

JSON key-value persistence used as the provenance backend:
- Atomic writes (write to temp, then rename)
- Thread-safe operations
- Explicit initialization; an uninitialized store refuses reads and writes
"""

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

from ..exit_codes import StoreUnavailableError

logger = logging.getLogger(__name__)


class FileStore:
    """
    JSON file persistence with atomic writes.

    Example:
        store = FileStore(Path("stores/repositories.json"))
        store.put("demo-repository", {"cloned": True, ...})
        data = store.get("demo-repository")
    """

    def __init__(self, path: Path, auto_create: bool = True):
        """
        Initialize FileStore.

        Args:
            path: Path to JSON file
            auto_create: Create file and parent directories if they don't exist
        """
        self.path = Path(path).expanduser().resolve()
        self._lock = threading.Lock()
        self._cache: Optional[Dict[str, Any]] = None

        if auto_create:
            self.initialize()

    @property
    def initialized(self) -> bool:
        return self.path.is_file()

    def initialize(self) -> None:
        """Create file and parent directories if needed."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            self._write_atomic({})

    def _require(self) -> None:
        if not self.initialized:
            raise StoreUnavailableError(f"store not initialized at {self.path}")

    def _write_atomic(self, data: Dict[str, Any]) -> None:
        """Write data atomically using temp file and rename."""
        fd, temp_path = tempfile.mkstemp(
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp"
        )

        try:
            with os.fdopen(fd, 'w') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
                f.write('\n')
            os.replace(temp_path, self.path)
        except BaseException:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

    def _load(self) -> Dict[str, Any]:
        # Caller holds the lock
        if self._cache is not None:
            return self._cache
        self._require()
        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Error reading {self.path}: {e}")
            data = {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring non-object content in {self.path}")
            data = {}
        self._cache = data
        return data

    def read(self) -> Dict[str, Any]:
        """Read entire store."""
        with self._lock:
            return dict(self._load())

    def get(self, key: str, default: Any = None) -> Any:
        """Get single value, or default if absent."""
        with self._lock:
            return self._load().get(key, default)

    def put(self, key: str, value: Any) -> None:
        """Set single value, replacing any previous value."""
        with self._lock:
            data = dict(self._load())
            data[key] = value
            self._write_atomic(data)
            self._cache = data

    def delete(self, key: str) -> bool:
        """
        Delete a key.

        Returns:
            True if key was deleted, False if not found
        """
        with self._lock:
            data = dict(self._load())
            if key not in data:
                return False
            del data[key]
            self._write_atomic(data)
            self._cache = data
            return True

    def keys(self) -> List[str]:
        return list(self.read().keys())

    def invalidate_cache(self) -> None:
        """Invalidate in-memory cache, forcing next read from disk."""
        with self._lock:
            self._cache = None

    def __len__(self) -> int:
        return len(self.read())

    def __contains__(self, key: str) -> bool:
        return key in self.read()
