"""git implementation of VersionControlSource.

Every query shells out to the git executable with `subprocess.run` and is
run from the repository's top-level directory, so paths are always
repo-relative regardless of where the tool was launched.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from revtrack_core.errors import NotARepositoryError, VcsUnavailableError
from revtrack_core.models import ChangedFile, ChangeKind
from revtrack_core.vcs.base import VersionControlSource

logger = logging.getLogger(__name__)

_RENAME_LIKE = {ChangeKind.RENAMED, ChangeKind.COPIED}


def parse_name_status(output: bytes) -> list[ChangedFile]:
    """Parse `git diff --name-status -z` output.

    Records are NUL separated: a status token followed by one path, or by
    source and destination paths for renames and copies ("R100", "C075").
    Only the destination path is kept.
    """
    tokens = output.decode("utf-8", errors="surrogateescape").split("\0")
    files: list[ChangedFile] = []
    i = 0
    while i < len(tokens):
        status = tokens[i]
        if not status:
            i += 1
            continue
        kind = ChangeKind.from_status(status)
        width = 2 if kind in _RENAME_LIKE else 1
        paths = tokens[i + 1 : i + 1 + width]
        i += 1 + width
        if len(paths) < width or not paths[-1]:
            logger.debug("Truncated name-status record for %r", status)
            break
        files.append(ChangedFile(path=paths[-1], kind=kind))
    return files


def _split_nul(output: bytes) -> list[str]:
    return [p for p in output.decode("utf-8", errors="surrogateescape").split("\0") if p]


class GitSource(VersionControlSource):
    """Queries a git working tree through the git command line."""

    def __init__(self, root: str | Path | None = None, git: str = "git"):
        self._cwd = Path(root) if root is not None else Path.cwd()
        self._git = git
        self._toplevel: Path | None = None

    def _run(self, *args: str, cwd: Path | None = None) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                [self._git, *args],
                cwd=str(cwd or self._cwd),
                capture_output=True,
            )
        except FileNotFoundError as e:
            raise VcsUnavailableError(f"git executable not found: {self._git}") from e
        except OSError as e:
            raise VcsUnavailableError(f"could not run git: {e}") from e

    def _query(self, *args: str) -> bytes:
        result = self._run(*args, cwd=self.toplevel)
        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise VcsUnavailableError(f"git {args[0]} failed ({result.returncode}): {stderr}")
        return result.stdout

    @property
    def toplevel(self) -> Path:
        if self._toplevel is None:
            result = self._run("rev-parse", "--show-toplevel")
            if result.returncode != 0:
                raise NotARepositoryError(f"Not in a git repository: {self._cwd}")
            self._toplevel = Path(result.stdout.decode("utf-8").strip())
        return self._toplevel

    def metadata_dir(self) -> Path | None:
        result = self._run("rev-parse", "--absolute-git-dir")
        if result.returncode != 0:
            return None
        return Path(result.stdout.decode("utf-8").strip())

    def changed_files(self, reference: str) -> list[ChangedFile]:
        return parse_name_status(self._query("diff", "--name-status", "-z", reference, "--"))

    def untracked_files(self) -> list[str]:
        return _split_nul(self._query("ls-files", "--others", "--exclude-standard", "-z"))

    def diff(self, reference: str, path: str) -> bytes:
        return self._query("diff", reference, "--", path)

    def raw_content(self, path: str) -> bytes | None:
        try:
            return (self.toplevel / path).read_bytes()
        except OSError:
            return None

    def is_tracked(self, path: str) -> bool:
        result = self._run("ls-files", "--error-unmatch", "--", path, cwd=self.toplevel)
        return result.returncode == 0

    def has_changes(self, reference: str, path: str) -> bool:
        # --quiet exits 1 when there are differences, 0 when there are none.
        result = self._run("diff", "--quiet", reference, "--", path, cwd=self.toplevel)
        if result.returncode not in (0, 1):
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise VcsUnavailableError(f"git diff --quiet failed ({result.returncode}): {stderr}")
        return result.returncode == 1

    def repo_path(self, path: str) -> str:
        """Resolve `path` against the launch directory and make it repo-relative.

        Paths outside the working tree are returned unchanged.
        """
        absolute = (self._cwd / path).resolve()
        try:
            return absolute.relative_to(self.toplevel.resolve()).as_posix()
        except ValueError:
            return path

    def branches(self) -> list[str]:
        try:
            output = self._query("branch", "-a", "--format=%(refname:short)")
        except (NotARepositoryError, VcsUnavailableError):
            return []
        return [line for line in output.decode("utf-8", errors="replace").splitlines() if line]
