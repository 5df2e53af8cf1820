"""Persisted review-state models.

Decoupled from revtrack_core so the store layer can be used independently
and revtrack_core has no knowledge of the on-disk format.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ReviewedEntry:
    """A reviewed file and the diff hash it was reviewed under."""

    path: str
    diff_hash: str | None = None


@dataclass
class LegacyEntry:
    """A reviewed file written by older versions as a bare path string.

    Only exists at the deserialization boundary; normalised to a
    ReviewedEntry with no hash straight after load.
    """

    path: str

    def normalize(self) -> ReviewedEntry:
        return ReviewedEntry(path=self.path, diff_hash=None)


@dataclass
class PersistedRecord:
    """Durable subset of a review session.

    Only reviewed files are stored. Unreviewed files are always re-derived
    from git on the next start.
    """

    branch: str
    mode: str  # "branch" | "local"
    reviewed: list[ReviewedEntry] = field(default_factory=list)
