"""Tests for the session lifecycle controller."""

from unittest.mock import MagicMock

import pytest

from revtrack_core.models import ReferencePoint, ReviewMode
from revtrack_core.session import ReviewController
from revtrack_store.json_file import JsonFileStore


@pytest.fixture
def controller(vcs, store):
    vcs.change("a.py")
    vcs.change("b.py")
    return ReviewController(vcs, store=store, default_branch="origin/main")


class TestStart:
    def test_start_default_branch(self, controller):
        result = controller.start()

        assert result.ok
        assert controller.active
        assert controller.ledger.reference == ReferencePoint("origin/main")
        assert "2 files to review against origin/main (0 already reviewed)" in result.message

    def test_start_explicit_branch(self, controller):
        controller.start("origin/dev")
        assert controller.status().reference == ReferencePoint("origin/dev")

    def test_start_local(self, controller):
        result = controller.start_local()
        assert result.ok
        assert controller.ledger.reference.mode is ReviewMode.LOCAL
        assert "HEAD (uncommitted changes)" in result.message

    def test_same_reference_already_active(self, controller):
        controller.start()
        ledger = controller.ledger

        result = controller.start("origin/main")
        assert result.ok
        assert "already active" in result.message
        assert controller.ledger is ledger

    def test_no_changes_is_warning(self, vcs, store):
        result = ReviewController(vcs, store=store).start("origin/main")
        assert not result.ok
        assert result.level == "warning"
        assert "No changed files" in result.message

    def test_not_a_repository_is_error(self, controller, vcs):
        vcs.git_dir = None
        result = controller.start()
        assert not result.ok
        assert result.level == "error"
        assert not controller.active

    def test_vcs_failure_is_error(self, controller, vcs):
        vcs.fail = True
        result = controller.start()
        assert (result.ok, result.level) == (False, "error")

    def test_default_store_lives_in_git_dir(self, vcs, tmp_path):
        vcs.git_dir = tmp_path
        vcs.change("a.py")
        controller = ReviewController(vcs, state_filename="state.json")

        controller.start("origin/main")
        controller.ledger.mark_reviewed("a.py")

        assert JsonFileStore(tmp_path / "state.json").load().reviewed[0].path == "a.py"


class TestSwitchConfirmation:
    def test_switch_without_progress_needs_no_confirmation(self, controller):
        controller.start()
        confirm = MagicMock(return_value=False)

        result = controller.start("origin/dev", confirm=confirm)
        assert result.ok
        confirm.assert_not_called()
        assert controller.ledger.reference.identifier == "origin/dev"

    def test_switch_with_progress_asks(self, controller):
        controller.start()
        controller.ledger.mark_reviewed("a.py")
        confirm = MagicMock(return_value=True)

        result = controller.start("origin/dev", confirm=confirm)
        assert result.ok
        prompt = confirm.call_args.args[0]
        assert "1/2 files reviewed" in prompt
        assert "origin/main" in prompt and "origin/dev" in prompt
        assert controller.ledger.counts() == (0, 2)

    def test_declined_switch_keeps_session(self, controller):
        controller.start()
        controller.ledger.mark_reviewed("a.py")

        result = controller.start("origin/dev", confirm=lambda prompt: False)
        assert not result.ok
        assert result.message == "Review cancelled"
        assert controller.ledger.reference.identifier == "origin/main"
        assert controller.ledger.counts() == (1, 2)

    def test_no_callback_means_declined(self, controller):
        controller.start()
        controller.ledger.mark_reviewed("a.py")
        assert not controller.start_local().ok

    def test_force_skips_confirmation(self, controller):
        controller.start()
        controller.ledger.mark_reviewed("a.py")
        confirm = MagicMock()

        assert controller.start_local(force=True, confirm=confirm).ok
        confirm.assert_not_called()
        assert controller.ledger.reference == ReferencePoint.local()


class TestResume:
    def test_resume_restores_reference_and_marks(self, vcs, store):
        vcs.change("a.py")
        first = ReviewController(vcs, store=store)
        first.start_local()
        first.ledger.mark_reviewed("a.py")
        first.close()

        second = ReviewController(vcs, store=store)
        assert second.resume().ok
        assert second.ledger.reference == ReferencePoint.local()
        assert second.ledger.counts() == (1, 1)

    def test_resume_without_record(self, controller):
        result = controller.resume()
        assert (result.ok, result.level) == (False, "warning")
        assert not controller.active

    def test_resume_when_active(self, controller):
        controller.start()
        assert "already active" in controller.resume().message

    def test_resume_outside_repository(self, controller, vcs):
        vcs.git_dir = None
        assert controller.resume().level == "error"


class TestClose:
    def test_close_keeps_persisted_record(self, controller, store):
        controller.start()
        controller.ledger.mark_reviewed("a.py")

        result = controller.close()
        assert result.ok
        assert not controller.active
        assert controller.status() is None
        assert store.load().reviewed[0].path == "a.py"

    def test_close_when_inactive(self, controller):
        assert not controller.close().ok


class TestCheckAndRefresh:
    def test_skips_when_file_set_unchanged(self, controller, vcs):
        controller.start()
        controller.ledger.mark_reviewed("a.py")
        vcs.change("a.py", diff=b"+edited\n")
        assert controller.check_and_refresh() is None

    def test_refreshes_when_file_set_moved(self, controller, vcs):
        controller.start()
        controller.ledger.mark_reviewed("a.py")
        vcs.change("a.py", diff=b"+edited\n")
        vcs.add_untracked("c.py")

        assert controller.check_and_refresh() == ["a.py"]
        assert controller.ledger.counts() == (0, 3)

    def test_inactive(self, controller):
        assert controller.check_and_refresh() is None
