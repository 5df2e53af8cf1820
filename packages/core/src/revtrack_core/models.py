"""Review session data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

LOCAL_REFERENCE = "HEAD"


class ReviewMode(str, Enum):
    BRANCH = "branch"  # diff against a branch or commit
    LOCAL = "local"  # uncommitted changes against HEAD


class ChangeKind(str, Enum):
    """Nature of a file's difference, keyed by git's status letter."""

    MODIFIED = "M"
    ADDED = "A"
    DELETED = "D"
    RENAMED = "R"
    COPIED = "C"
    TYPE_CHANGED = "T"
    UNMERGED = "U"
    UNTRACKED = "?"

    @classmethod
    def from_status(cls, status: str) -> ChangeKind:
        """Map a name-status token ("M", "R100", "C075") to a ChangeKind.

        Unknown letters fall back to MODIFIED.
        """
        try:
            return cls(status[:1])
        except ValueError:
            return cls.MODIFIED


@dataclass(frozen=True)
class ReferencePoint:
    """Baseline the working tree is compared against."""

    identifier: str
    mode: ReviewMode = ReviewMode.BRANCH

    @classmethod
    def local(cls) -> ReferencePoint:
        return cls(LOCAL_REFERENCE, ReviewMode.LOCAL)

    @property
    def label(self) -> str:
        if self.mode is ReviewMode.LOCAL:
            return f"{self.identifier} (uncommitted changes)"
        return self.identifier


@dataclass(frozen=True)
class ChangedFile:
    path: str
    kind: ChangeKind = ChangeKind.MODIFIED


@dataclass
class FileEntry:
    """Review state of one changed file.

    `fingerprint` is only set while `reviewed` is True. A reviewed entry
    without a fingerprint came from a legacy record and stays valid until a
    refresh can compute one.
    """

    path: str
    reviewed: bool = False
    fingerprint: str | None = None
    kind: ChangeKind = ChangeKind.MODIFIED


@dataclass
class ReviewSession:
    active: bool = False
    reference: ReferencePoint | None = None
    files: dict[str, FileEntry] = field(default_factory=dict)


@dataclass(frozen=True)
class ReviewStatus:
    reference: ReferencePoint
    reviewed: int
    total: int
