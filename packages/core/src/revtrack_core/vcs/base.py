"""Version control source interface.

The ledger, enumerator and fingerprint provider only talk to this
interface. GitSource is the production implementation; tests use an
in-memory fake.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from revtrack_core.models import ChangedFile


class VersionControlSource(ABC):
    """Stateless query surface over a working tree.

    Queries raise VcsUnavailableError when the underlying tool fails, and
    NotARepositoryError where a repository is required but absent.
    """

    @abstractmethod
    def metadata_dir(self) -> Path | None:
        """Return the absolute VCS metadata directory, or None outside a repository."""

    @abstractmethod
    def changed_files(self, reference: str) -> list[ChangedFile]:
        """Files differing between the working tree and `reference`.

        Two-sided: committed and uncommitted changes both show up. Renames
        and copies are reported under their destination path.
        """

    @abstractmethod
    def untracked_files(self) -> list[str]:
        """Untracked, non-ignored files present in the working tree."""

    @abstractmethod
    def diff(self, reference: str, path: str) -> bytes:
        """Raw diff of one file against `reference`; empty when there is none."""

    @abstractmethod
    def raw_content(self, path: str) -> bytes | None:
        """Current working-tree bytes of `path`, or None if unreadable."""

    @abstractmethod
    def is_tracked(self, path: str) -> bool:
        """Whether `path` is known to the index."""

    @abstractmethod
    def has_changes(self, reference: str, path: str) -> bool:
        """Whether `path` still differs from `reference`."""

    def repo_path(self, path: str) -> str:
        """Convert a user-supplied path to the repo-relative form used as ledger key."""
        return path

    def branches(self) -> list[str]:
        """Branch names usable as references. Optional, used for completion."""
        return []
