"""Shared fixtures: an in-memory git stand-in and a file-backed store."""

from __future__ import annotations

from pathlib import Path

import pytest

from revtrack_core.errors import VcsUnavailableError
from revtrack_core.models import ChangedFile, ChangeKind
from revtrack_core.vcs.base import VersionControlSource
from revtrack_store.json_file import JsonFileStore


class FakeSource(VersionControlSource):
    """Working tree held in dicts. Diffs are the same for every reference."""

    def __init__(self, git_dir: Path | None = Path("/repo/.git")):
        self.git_dir = git_dir
        self.changes: dict[str, ChangeKind] = {}
        self.diffs: dict[str, bytes] = {}
        self.untracked: list[str] = []
        self.contents: dict[str, bytes] = {}
        self.fail = False
        self.references: list[str] = []

    # Scenario helpers ---------------------------------------------------

    def change(self, path: str, diff: bytes | None = None, kind: ChangeKind = ChangeKind.MODIFIED) -> None:
        self.changes[path] = kind
        self.diffs[path] = diff if diff is not None else f"diff of {path}\n".encode()
        self.contents.setdefault(path, f"content of {path}\n".encode())

    def add_untracked(self, path: str, content: bytes | None = None) -> None:
        self.untracked.append(path)
        self.contents[path] = content if content is not None else f"new file {path}\n".encode()

    def revert(self, path: str) -> None:
        self.changes.pop(path, None)
        self.diffs.pop(path, None)
        if path in self.untracked:
            self.untracked.remove(path)

    # VersionControlSource -------------------------------------------------

    def _check(self) -> None:
        if self.fail:
            raise VcsUnavailableError("git exited with status 128")

    def metadata_dir(self) -> Path | None:
        return self.git_dir

    def changed_files(self, reference: str) -> list[ChangedFile]:
        self._check()
        self.references.append(reference)
        return [ChangedFile(path=p, kind=k) for p, k in self.changes.items()]

    def untracked_files(self) -> list[str]:
        self._check()
        return list(self.untracked)

    def diff(self, reference: str, path: str) -> bytes:
        self._check()
        return self.diffs.get(path, b"")

    def raw_content(self, path: str) -> bytes | None:
        return self.contents.get(path)

    def is_tracked(self, path: str) -> bool:
        self._check()
        return path not in self.untracked

    def has_changes(self, reference: str, path: str) -> bool:
        self._check()
        return path in self.changes


@pytest.fixture
def vcs() -> FakeSource:
    return FakeSource()


@pytest.fixture
def store(tmp_path) -> JsonFileStore:
    return JsonFileStore(tmp_path / "code-review-state.json")
