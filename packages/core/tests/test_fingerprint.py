"""Tests for diff fingerprints."""

import hashlib

from revtrack_core.fingerprint import compute_fingerprint, hash_bytes


def _md5(data: bytes) -> str:
    return hashlib.md5(data).hexdigest()


class TestComputeFingerprint:
    def test_hashes_the_diff(self, vcs):
        vcs.change("src/app.py", diff=b"@@ -1 +1 @@\n-a\n+b\n")
        assert compute_fingerprint(vcs, "origin/main", "src/app.py") == _md5(b"@@ -1 +1 @@\n-a\n+b\n")

    def test_stable_across_calls(self, vcs):
        vcs.change("src/app.py")
        first = compute_fingerprint(vcs, "origin/main", "src/app.py")
        assert compute_fingerprint(vcs, "origin/main", "src/app.py") == first

    def test_changes_when_diff_changes(self, vcs):
        vcs.change("src/app.py", diff=b"+one\n")
        before = compute_fingerprint(vcs, "origin/main", "src/app.py")
        vcs.change("src/app.py", diff=b"+two\n")
        assert compute_fingerprint(vcs, "origin/main", "src/app.py") != before

    def test_untracked_file_falls_back_to_content_hash(self, vcs):
        vcs.add_untracked("notes.md", content=b"# notes\n")
        result = compute_fingerprint(vcs, "HEAD", "notes.md")
        assert result == _md5(b"# notes\n")
        assert result != _md5(b"")

    def test_untracked_files_do_not_collide(self, vcs):
        vcs.add_untracked("a.md", content=b"a")
        vcs.add_untracked("b.md", content=b"b")
        assert compute_fingerprint(vcs, "HEAD", "a.md") != compute_fingerprint(vcs, "HEAD", "b.md")

    def test_failed_diff_falls_back_to_content(self, vcs):
        vcs.contents["src/app.py"] = b"print('hi')\n"
        vcs.fail = True
        assert compute_fingerprint(vcs, "origin/main", "src/app.py") == _md5(b"print('hi')\n")

    def test_none_when_no_diff_and_unreadable(self, vcs):
        assert compute_fingerprint(vcs, "origin/main", "gone.py") is None


def test_hash_bytes_is_md5():
    assert hash_bytes(b"") == "d41d8cd98f00b204e9800998ecf8427e"
