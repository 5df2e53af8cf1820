"""Session lifecycle: start, switch, resume and close review sessions.

ReviewController is the engine boundary. Every engine error is turned into
a SessionResult with a human-readable message here, so the presentation
layer never has to handle exceptions from the ledger or git.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from revtrack_core.errors import NoChanges, NotARepositoryError, RevtrackError
from revtrack_core.ledger import ReviewLedger
from revtrack_core.models import ReferencePoint, ReviewMode, ReviewStatus
from revtrack_store.json_file import STATE_FILENAME, JsonFileStore

if TYPE_CHECKING:
    from pathlib import Path

    from revtrack_core.vcs.base import VersionControlSource
    from revtrack_store.base import BaseStore

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[str], bool]


@dataclass(frozen=True)
class SessionResult:
    ok: bool
    message: str
    level: str = "info"  # "info" | "warning" | "error"


class ReviewController:
    """Owns the single active review session of a working tree.

    `store` overrides the default JSON file in the git directory; tests and
    `store: noop` configurations pass one in.
    """

    def __init__(
        self,
        vcs: VersionControlSource,
        store: BaseStore | None = None,
        default_branch: str = "origin/HEAD",
        state_filename: str = STATE_FILENAME,
    ):
        self._vcs = vcs
        self._store = store
        self._default_branch = default_branch
        self._state_filename = state_filename
        self.ledger: ReviewLedger | None = None

    @property
    def vcs(self) -> VersionControlSource:
        return self._vcs

    @property
    def active(self) -> bool:
        return self.ledger is not None and self.ledger.active

    def status(self) -> ReviewStatus | None:
        return self.ledger.status() if self.ledger is not None else None

    def start(
        self,
        branch: str | None = None,
        *,
        force: bool = False,
        confirm: ConfirmCallback | None = None,
    ) -> SessionResult:
        """Start reviewing against `branch` (default branch if omitted)."""
        return self._switch(ReferencePoint(branch or self._default_branch), force, confirm)

    def start_local(self, *, force: bool = False, confirm: ConfirmCallback | None = None) -> SessionResult:
        """Start reviewing uncommitted changes against HEAD."""
        return self._switch(ReferencePoint.local(), force, confirm)

    def resume(self) -> SessionResult:
        """Re-open the review recorded in the persisted state, if any."""
        if self.active:
            return SessionResult(True, f"Review against {self.ledger.reference.label} is already active")

        try:
            git_dir = self._require_git_dir()
        except RevtrackError as e:
            return SessionResult(False, str(e), "error")

        record = self._open_store(git_dir).load()
        if record is None:
            return SessionResult(False, "No review in progress", "warning")
        try:
            mode = ReviewMode(record.mode)
        except ValueError:
            mode = ReviewMode.BRANCH
        return self._open(ReferencePoint(record.branch, mode))

    def close(self) -> SessionResult:
        if not self.active:
            return SessionResult(False, "No active code review", "warning")
        self.ledger.close()
        self.ledger = None
        return SessionResult(True, "Code Review closed")

    def check_and_refresh(self) -> list[str] | None:
        """Refresh only when the set of changed files moved.

        Returns the invalidated paths of the refresh, or None if no refresh ran.
        """
        if not self.active or not self.ledger.has_drifted():
            return None
        return self.ledger.refresh()

    # ------------------------------------------------------------------ #
    # Internals                                                            #
    # ------------------------------------------------------------------ #

    def _switch(
        self,
        reference: ReferencePoint,
        force: bool,
        confirm: ConfirmCallback | None,
    ) -> SessionResult:
        current = self.ledger
        if current is not None and current.active:
            if current.reference == reference:
                return SessionResult(True, f"Review against {reference.label} is already active")

            reviewed, total = current.counts()
            if reviewed > 0 and not force:
                prompt = (
                    f"You have {reviewed}/{total} files reviewed in the current review "
                    f"({current.reference.label}).\n"
                    f"Start new review against {reference.label}? This will lose your progress."
                )
                if confirm is None or not confirm(prompt):
                    return SessionResult(False, "Review cancelled")
            self.close()

        return self._open(reference)

    def _open(self, reference: ReferencePoint) -> SessionResult:
        try:
            ledger = ReviewLedger(self._vcs, self._open_store(self._require_git_dir()))
            ledger.init(reference)
        except NoChanges as e:
            return SessionResult(False, str(e), "warning")
        except RevtrackError as e:
            logger.debug("Could not start review against %s: %s", reference.label, e)
            return SessionResult(False, str(e), "error")

        self.ledger = ledger
        reviewed, total = ledger.counts()
        return SessionResult(
            True,
            f"Code Review: {total - reviewed} files to review against {reference.label} ({reviewed} already reviewed)",
        )

    def _require_git_dir(self) -> Path:
        git_dir = self._vcs.metadata_dir()
        if git_dir is None:
            raise NotARepositoryError("Not in a git repository")
        return git_dir

    def _open_store(self, git_dir: Path) -> BaseStore:
        if self._store is not None:
            return self._store
        return JsonFileStore(git_dir / self._state_filename)
