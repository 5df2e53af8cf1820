"""Tests for change set enumeration."""

import pytest

from revtrack_core.changeset import enumerate_changes
from revtrack_core.errors import VcsUnavailableError
from revtrack_core.models import ChangedFile, ChangeKind


class TestEnumerateChanges:
    def test_tracked_changes_reported_with_kind(self, vcs):
        vcs.change("a.py", kind=ChangeKind.ADDED)
        vcs.change("b.py", kind=ChangeKind.RENAMED)

        assert enumerate_changes(vcs, "origin/main") == [
            ChangedFile("a.py", ChangeKind.ADDED),
            ChangedFile("b.py", ChangeKind.RENAMED),
        ]

    def test_untracked_files_added(self, vcs):
        vcs.change("a.py")
        vcs.add_untracked("new.py")

        result = enumerate_changes(vcs, "origin/main")
        assert ChangedFile("new.py", ChangeKind.UNTRACKED) in result
        assert len(result) == 2

    def test_tracked_entry_wins_over_untracked(self, vcs):
        vcs.change("both.py", kind=ChangeKind.ADDED)
        vcs.untracked.append("both.py")

        assert enumerate_changes(vcs, "origin/main") == [ChangedFile("both.py", ChangeKind.ADDED)]

    def test_duplicate_tracked_paths_collapsed(self, vcs, mocker):
        mocker.patch.object(
            vcs,
            "changed_files",
            return_value=[ChangedFile("a.py", ChangeKind.MODIFIED), ChangedFile("a.py", ChangeKind.DELETED)],
        )
        assert enumerate_changes(vcs, "origin/main") == [ChangedFile("a.py", ChangeKind.MODIFIED)]

    def test_queries_the_given_reference(self, vcs):
        enumerate_changes(vcs, "origin/dev")
        assert vcs.references == ["origin/dev"]

    def test_nothing_changed_is_empty_not_error(self, vcs):
        assert enumerate_changes(vcs, "origin/main") == []

    def test_vcs_failure_propagates(self, vcs):
        vcs.fail = True
        with pytest.raises(VcsUnavailableError):
            enumerate_changes(vcs, "origin/main")
