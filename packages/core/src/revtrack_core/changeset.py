"""Change set enumeration: what is there to review against a reference."""

from __future__ import annotations

from typing import TYPE_CHECKING

from revtrack_core.models import ChangedFile, ChangeKind

if TYPE_CHECKING:
    from revtrack_core.vcs.base import VersionControlSource


def enumerate_changes(vcs: VersionControlSource, reference: str) -> list[ChangedFile]:
    """Return the de-duplicated files that differ from `reference`.

    Tracked changes come first; untracked files are added as UNTRACKED
    unless the diff already reported the same path, since the diff carries
    the richer change kind. An empty list means there is nothing to review.

    Raises NotARepositoryError or VcsUnavailableError from the source.
    """
    files: list[ChangedFile] = []
    seen: set[str] = set()

    for changed in vcs.changed_files(reference):
        if changed.path in seen:
            continue
        files.append(changed)
        seen.add(changed.path)

    for path in vcs.untracked_files():
        if path in seen:
            continue
        files.append(ChangedFile(path=path, kind=ChangeKind.UNTRACKED))
        seen.add(path)

    return files
