"""Local key-value state kept in a JSON file.

Holds device-local settings that must survive restarts but never leave the
device, such as the restriction selection and the lock status.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class LocalStateStore:
    """Small JSON-file key-value store.

    An unreadable or invalid file is treated as empty.
    """

    def __init__(self, path: str | Path) -> None:
        """Initialize the store.

        Args:
            path: JSON file path. ``~`` is expanded.
        """
        self._path = Path(path).expanduser()
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._read().get(key, default)

    def get_bool(self, key: str) -> bool:
        """Return the value as a bool, False when absent."""
        return self.get(key, False) is True

    def set(self, key: str, value: Any) -> bool:
        """Store a JSON-serializable value.

        Returns:
            True if saved successfully, False otherwise.
        """
        with self._lock:
            data = self._read()
            data[key] = value
            return self._write(data)

    def remove(self, key: str) -> bool:
        with self._lock:
            data = self._read()
            if key not in data:
                return True
            del data[key]
            return self._write(data)

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}

        try:
            with open(self._path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in local state: {e}")
            return {}
        except OSError as e:
            logger.error(f"Failed to read local state: {e}")
            return {}

        if not isinstance(data, dict):
            logger.error(f"Local state at {self._path} is not an object, ignoring")
            return {}
        return data

    def _write(self, data: dict[str, Any]) -> bool:
        try:
            text = json.dumps(data, indent=2)
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w") as f:
                f.write(text)
        except (OSError, TypeError) as e:
            logger.error(f"Failed to save local state: {e}")
            return False

        logger.debug(f"Saved local state to {self._path}")
        return True


__all__ = ["LocalStateStore"]
