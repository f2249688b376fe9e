"""Key-value storage abstractions for guest session state."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

ChangeListener = Callable[[str], None]


class StorageError(Exception):
    """Raised when the underlying storage cannot be read or written."""


class KeyValueStorage(Protocol):
    """Interface for string key-value persistence."""

    def get(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""

    def set(self, key: str, value: str) -> None:
        """Store a value, overwriting any previous one."""

    def remove(self, key: str) -> None:
        """Remove a key if present."""


class ObservableStorage(KeyValueStorage, Protocol):
    """Storage that can report writes made by another process or tab."""

    def on_external_change(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a listener for external changes and return an unsubscriber."""


def supports_external_changes(storage: KeyValueStorage) -> bool:
    """Return True if the storage can deliver external change notifications."""
    return callable(getattr(storage, "on_external_change", None))


@dataclass
class InMemoryStorage(ObservableStorage):
    """Dict-backed storage used for tests and as a process-local store."""

    values: dict[str, str] = field(default_factory=dict)
    _listeners: list[ChangeListener] = field(
        default_factory=list, init=False, repr=False
    )

    def get(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        """Store a value."""
        self.values[key] = value

    def remove(self, key: str) -> None:
        """Remove a key if present."""
        self.values.pop(key, None)

    def on_external_change(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a listener for simulated external changes."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit_external_change(self, key: str, value: str | None) -> None:
        """Apply a write as if another tab made it, then notify listeners."""
        if value is None:
            self.values.pop(key, None)
        else:
            self.values[key] = value
        for listener in list(self._listeners):
            listener(key)
