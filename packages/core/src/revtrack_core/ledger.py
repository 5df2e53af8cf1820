"""Review ledger: the in-memory authority on which files are reviewed.

Per file the state machine is

    unreviewed --mark--> reviewed --unmark / fingerprint changed--> unreviewed

plus removal when a file drops out of the change set. The ledger owns the
session's file map exclusively: queries hand out copies, the store only
ever sees a PersistedRecord snapshot, and every mutation persists before
returning.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from revtrack_core.changeset import enumerate_changes
from revtrack_core.errors import NoChanges, NotARepositoryError, RevtrackError
from revtrack_core.events import FileDropped, FilesInvalidated, LedgerEvent, PersistenceDegraded
from revtrack_core.fingerprint import compute_fingerprint
from revtrack_core.models import FileEntry, ReferencePoint, ReviewSession, ReviewStatus
from revtrack_store.models import PersistedRecord, ReviewedEntry
from revtrack_store.noop import NoOpStore

if TYPE_CHECKING:
    from revtrack_core.vcs.base import VersionControlSource
    from revtrack_store.base import BaseStore

logger = logging.getLogger(__name__)


def _sort_key(entry: FileEntry) -> tuple[bool, str]:
    # Unreviewed (False) sorts before reviewed (True), then by path.
    return entry.reviewed, entry.path


def _first_unreviewed_after(order: list[FileEntry], from_path: str | None) -> str | None:
    """Search `order` strictly after `from_path`, wrapping around.

    `from_path` is the last candidate, so None means every file is
    reviewed. An unknown or None `from_path` searches from the start.
    """
    paths = [e.path for e in order]
    start = paths.index(from_path) if from_path in paths else -1
    candidates = order[start + 1 :] + order[: start + 1]
    return next((e.path for e in candidates if not e.reviewed), None)


class ReviewLedger:
    """Review state of one session, merged with git and the persisted record."""

    def __init__(self, vcs: VersionControlSource, store: BaseStore | None = None):
        self._vcs = vcs
        self._store = store if store is not None else NoOpStore()
        self.session = ReviewSession()
        self._events: list[LedgerEvent] = []
        self._degraded = False

    # ------------------------------------------------------------------ #
    # Lifecycle                                                            #
    # ------------------------------------------------------------------ #

    @property
    def active(self) -> bool:
        return self.session.active

    @property
    def reference(self) -> ReferencePoint | None:
        return self.session.reference

    def init(self, reference: ReferencePoint) -> None:
        """Build the session for `reference` and persist it.

        Persisted marks are carried over only when the record was written for
        the same reference and mode, and only for files whose stored diff hash
        is missing (legacy record) or still matches. Marks dropped because the
        hash changed are queued as one FilesInvalidated event.

        Raises NotARepositoryError, VcsUnavailableError, or NoChanges when
        there is nothing to review. The session stays inactive in all three.
        """
        if self._vcs.metadata_dir() is None:
            raise NotARepositoryError("Not in a git repository")

        changes = enumerate_changes(self._vcs, reference.identifier)
        if not changes:
            raise NoChanges(f"No changed files against {reference.label}")

        carried = self._load_reviewed(reference)
        files: dict[str, FileEntry] = {}
        invalidated: list[str] = []
        for changed in changes:
            entry = FileEntry(path=changed.path, kind=changed.kind)
            if changed.path in carried:
                stored = carried[changed.path]
                current = compute_fingerprint(self._vcs, reference.identifier, changed.path)
                if stored is None or stored == current:
                    entry.reviewed = True
                    entry.fingerprint = current if current is not None else stored
                else:
                    invalidated.append(changed.path)
            files[changed.path] = entry

        self.session = ReviewSession(active=True, reference=reference, files=files)
        self._events = []
        self._degraded = False
        if invalidated:
            self._events.append(FilesInvalidated(tuple(sorted(invalidated))))
        logger.debug("Review session started against %s with %d file(s)", reference.label, len(files))

        # Persist straight away so the reference is recorded before any review.
        self._persist()

    def close(self) -> None:
        """Tear down the in-memory session. The persisted record is kept."""
        self._store.close()
        self.session = ReviewSession()
        self._events = []

    def _load_reviewed(self, reference: ReferencePoint) -> dict[str, str | None]:
        record = self._store.load()
        if record is None:
            return {}
        if record.branch != reference.identifier or record.mode != reference.mode.value:
            # Reviewed against a different baseline means nothing here.
            logger.debug(
                "Discarding review state recorded for %s (%s)",
                record.branch,
                record.mode,
            )
            return {}
        return {e.path: e.diff_hash for e in record.reviewed}

    def _persist(self) -> None:
        reference = self.session.reference
        if not self.session.active or reference is None:
            return
        record = PersistedRecord(
            branch=reference.identifier,
            mode=reference.mode.value,
            reviewed=[
                ReviewedEntry(path=e.path, diff_hash=e.fingerprint)
                for e in sorted(self.session.files.values(), key=lambda e: e.path)
                if e.reviewed
            ],
        )
        if not self._store.save(record) and not self._degraded:
            self._degraded = True
            self._events.append(PersistenceDegraded("could not write review state; progress is kept in memory only"))

    def _fingerprint(self, path: str) -> str | None:
        reference = self.session.reference
        if reference is None:
            return None
        return compute_fingerprint(self._vcs, reference.identifier, path)

    def _entry(self, path: str) -> FileEntry | None:
        if not self.session.active:
            return None
        return self.session.files.get(path)

    # ------------------------------------------------------------------ #
    # Mutations                                                            #
    # ------------------------------------------------------------------ #

    def mark_reviewed(self, path: str) -> bool:
        """Mark `path` reviewed under its current fingerprint.

        Returns False (and does nothing) if the path is unknown or already reviewed.
        """
        entry = self._entry(path)
        if entry is None or entry.reviewed:
            return False
        entry.reviewed = True
        entry.fingerprint = self._fingerprint(path)
        self._persist()
        return True

    def mark_unreviewed(self, path: str) -> bool:
        entry = self._entry(path)
        if entry is None or not entry.reviewed:
            return False
        entry.reviewed = False
        entry.fingerprint = None
        self._persist()
        return True

    def toggle(self, path: str) -> bool:
        """Flip the reviewed state of `path`. Returns False for unknown paths."""
        entry = self._entry(path)
        if entry is None:
            return False
        if entry.reviewed:
            return self.mark_unreviewed(path)
        return self.mark_reviewed(path)

    def mark_and_next(self, path: str) -> str | None:
        """Mark `path` reviewed and return the next unreviewed file.

        The next file is looked up before marking, while `path` still holds
        its place in the unreviewed group. None once `path` was the last
        unreviewed file.
        """
        next_path = self.next_unreviewed(path)
        self.mark_reviewed(path)
        return next_path if next_path != path else None

    def refresh(self) -> list[str]:
        """Re-enumerate the change set and revalidate every reviewed file.

        Reviewed files keep their mark while their fingerprint matches (or
        cannot be computed right now); otherwise they become unreviewed and
        are reported. Files that no longer differ are dropped with a
        FileDropped event each, new files start unreviewed. A failing git query leaves the state untouched.

        Returns the invalidated paths, sorted.
        """
        if not self.session.active or self.session.reference is None:
            return []

        try:
            changes = enumerate_changes(self._vcs, self.session.reference.identifier)
        except RevtrackError as e:
            logger.debug("Refresh skipped, keeping last known state: %s", e)
            return []

        previous_files = self.session.files
        files: dict[str, FileEntry] = {}
        invalidated: list[str] = []
        for changed in changes:
            entry = FileEntry(path=changed.path, kind=changed.kind)
            previous = previous_files.get(changed.path)
            if previous is not None and previous.reviewed:
                current = self._fingerprint(changed.path)
                if previous.fingerprint is None or current is None or previous.fingerprint == current:
                    entry.reviewed = True
                    entry.fingerprint = current if current is not None else previous.fingerprint
                else:
                    invalidated.append(changed.path)
            files[changed.path] = entry

        dropped = sorted(set(previous_files) - set(files))
        self.session.files = files
        self._persist()

        invalidated.sort()
        if invalidated:
            self._events.append(FilesInvalidated(tuple(invalidated)))
        for path in dropped:
            self._events.append(FileDropped(path=path, next_unreviewed=self.first_unreviewed()))
        logger.debug(
            "Refreshed against %s: %d file(s), %d invalidated, %d dropped",
            self.session.reference.label,
            len(files),
            len(invalidated),
            len(dropped),
        )
        return invalidated

    def file_saved(self, path: str) -> bool:
        """React to `path` being written in the working tree.

        An untracked file was just edited, so a review mark is cleared. A
        tracked file that no longer differs from the reference is dropped and
        a FileDropped event carries the file to open next. A tracked file
        that still differs loses its review mark.

        Returns whether the ledger changed.
        """
        if self._entry(path) is None:
            return False
        reference = self.session.reference.identifier

        try:
            if not self._vcs.is_tracked(path):
                return self.mark_unreviewed(path)
            still_changed = self._vcs.has_changes(reference, path)
        except RevtrackError as e:
            logger.debug("Ignoring save of %s: %s", path, e)
            return False

        if still_changed:
            return self.mark_unreviewed(path)

        del self.session.files[path]
        self._persist()
        self._events.append(FileDropped(path=path, next_unreviewed=self.first_unreviewed()))
        return True

    def drain_events(self) -> list[LedgerEvent]:
        """Return queued follow-up events and clear the queue."""
        events, self._events = self._events, []
        return events

    # ------------------------------------------------------------------ #
    # Queries                                                              #
    # ------------------------------------------------------------------ #

    def has_drifted(self) -> bool:
        """Whether the set of changed paths no longer matches the ledger's."""
        if not self.session.active or self.session.reference is None:
            return False
        try:
            changes = enumerate_changes(self._vcs, self.session.reference.identifier)
        except RevtrackError:
            return False
        current = {c.path for c in changes}
        return len(current) != len(self.session.files) or current != set(self.session.files)

    def list_sorted(self) -> list[FileEntry]:
        """Unreviewed files first, then reviewed; each group by path."""
        return [replace(e) for e in sorted(self.session.files.values(), key=_sort_key)]

    def counts(self) -> tuple[int, int]:
        """Return (reviewed, total)."""
        files = self.session.files
        return sum(1 for e in files.values() if e.reviewed), len(files)

    def first_unreviewed(self) -> str | None:
        return next((e.path for e in self.list_sorted() if not e.reviewed), None)

    def next_unreviewed(self, from_path: str | None = None) -> str | None:
        return _first_unreviewed_after(self.list_sorted(), from_path)

    def previous_unreviewed(self, from_path: str | None = None) -> str | None:
        return _first_unreviewed_after(list(reversed(self.list_sorted())), from_path)

    def status(self) -> ReviewStatus | None:
        if not self.session.active or self.session.reference is None:
            return None
        reviewed, total = self.counts()
        return ReviewStatus(reference=self.session.reference, reviewed=reviewed, total=total)
