"""Follow-up events queued by ledger mutations.

The ledger never calls back into the presentation layer while a mutation
is running. It queues these events instead; the presentation drains them
with ReviewLedger.drain_events() on its own turn (for example after an
editor save handler has returned) and reacts: one aggregate notification
for invalidated files, or opening the next unreviewed file after a drop.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class FilesInvalidated:
    """Reviewed files whose fingerprint changed, now unreviewed."""

    paths: tuple[str, ...]


@dataclass(frozen=True)
class FileDropped:
    """A file that no longer differs from the reference was removed."""

    path: str
    next_unreviewed: str | None


@dataclass(frozen=True)
class PersistenceDegraded:
    """The state file could not be written; the session is in-memory only."""

    reason: str


LedgerEvent = Union[FilesInvalidated, FileDropped, PersistenceDegraded]
