"""Abstract store interface.

The review ledger depends on BaseStore, not on a concrete backend, so the
JSON file store can be swapped for the in-memory NoOpStore without touching
ledger code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from revtrack_store.models import PersistedRecord


class BaseStore(ABC):
    """Pluggable persistence layer for review state.

    Implementations must never raise to the caller: a store that cannot
    read or write degrades the session to in-memory only.
    """

    @abstractmethod
    def save(self, record: PersistedRecord) -> bool:
        """Persist the record. Returns False if it could not be written."""

    @abstractmethod
    def load(self) -> PersistedRecord | None:
        """Return the persisted record, or None if missing or unreadable."""

    def close(self) -> None:
        """Release any resources held by the store.

        Default is a no-op so callers can always call close() safely.
        """
