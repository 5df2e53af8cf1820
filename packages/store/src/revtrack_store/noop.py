"""No-op store: review state lives in memory for the session only.

Used when `store: noop` is configured. Using a NoOpStore rather than None
lets the ledger always call store.save() without conditional checks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from revtrack_store.base import BaseStore

if TYPE_CHECKING:
    from revtrack_store.models import PersistedRecord


class NoOpStore(BaseStore):
    """Silently discards all records."""

    def save(self, record: PersistedRecord) -> bool:
        return True

    def load(self) -> PersistedRecord | None:
        return None
