"""JSON file-backed key-value storage."""

import json
import logging
import os
import tempfile
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from opener_studio.services.storage import (
    ChangeListener,
    ObservableStorage,
    StorageError,
)

logger = logging.getLogger(__name__)


@dataclass
class JsonFileStorage(ObservableStorage):
    """Persist string values as one JSON object in a file.

    Every write rewrites the whole file through a temporary file and
    ``os.replace`` so readers never see a partial object. Writes from other
    processes are picked up by ``poll_external_changes``.
    """

    path: Path
    _snapshot: dict[str, str] = field(default_factory=dict, init=False, repr=False)
    _listeners: list[ChangeListener] = field(
        default_factory=list, init=False, repr=False
    )

    @classmethod
    def create(cls, path: str | Path) -> "JsonFileStorage":
        """Create a file storage and load its current contents."""
        storage = cls(path=Path(path))
        try:
            storage._snapshot = storage._read()
        except StorageError:
            logger.warning("Guest storage %s is unreadable, starting empty", path)
        return storage

    def get(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        """Store a value and rewrite the file."""
        values = self._read()
        values[key] = value
        self._write(values)
        self._snapshot = {**self._snapshot, key: value}

    def remove(self, key: str) -> None:
        """Remove a key if present."""
        values = self._read()
        if key not in values:
            return
        del values[key]
        self._write(values)
        self._snapshot.pop(key, None)

    def on_external_change(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a listener for changes found by polling."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def poll_external_changes(self) -> list[str]:
        """Re-read the file and notify listeners about keys changed elsewhere."""
        try:
            current = self._read()
        except StorageError:
            logger.warning("Could not poll %s for external changes", self.path)
            return []
        changed = sorted(
            key
            for key in set(current) | set(self._snapshot)
            if current.get(key) != self._snapshot.get(key)
        )
        self._snapshot = current
        for key in changed:
            for listener in list(self._listeners):
                listener(key)
        return changed

    def _read(self) -> dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise StorageError(f"Cannot read {self.path}") from exc
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise StorageError(f"Corrupt storage file {self.path}") from exc
        if not isinstance(data, dict):
            raise StorageError(f"Unexpected storage layout in {self.path}")
        return {str(key): str(value) for key, value in data.items()}

    def _write(self, values: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
        except OSError as exc:
            raise StorageError(f"Cannot write {self.path}") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(values, handle)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(f"Cannot write {self.path}") from exc
        logger.debug("Wrote %d keys to %s", len(values), self.path)
