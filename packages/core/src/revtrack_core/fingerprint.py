"""Per-file fingerprints used to detect stale review marks.

A fingerprint is the MD5 of the file's diff against the reference, so a
reviewed file is only re-flagged when its changes differ, not when the
file is touched elsewhere. Files with no committed history (untracked
files diffed against HEAD) produce an empty diff; those fall back to the
MD5 of their raw content.

MD5 matches the hashes stored by earlier versions, which piped `git diff`
through `md5sum`, so existing state files stay valid.
"""

from __future__ import annotations

import hashlib
import logging
from typing import TYPE_CHECKING

from revtrack_core.errors import RevtrackError

if TYPE_CHECKING:
    from revtrack_core.vcs.base import VersionControlSource

logger = logging.getLogger(__name__)


def hash_bytes(content: bytes) -> str:
    return hashlib.md5(content).hexdigest()


def compute_fingerprint(vcs: VersionControlSource, reference: str, path: str) -> str | None:
    """Return the fingerprint of `path` against `reference`, or None.

    None means freshness cannot currently be verified (no diff and the file
    is unreadable), not that something went wrong.
    """
    try:
        diff = vcs.diff(reference, path)
    except RevtrackError as e:
        logger.debug("diff of %s against %s failed, hashing content: %s", path, reference, e)
        diff = b""

    if diff:
        return hash_bytes(diff)

    content = vcs.raw_content(path)
    if content is None:
        return None
    return hash_bytes(content)
