"""Errors raised inside the review engine.

All of them are caught by ReviewController and turned into a single
human-readable SessionResult; none escape to the presentation layer.
"""

from __future__ import annotations


class RevtrackError(Exception):
    """Base class for review engine errors."""


class NotARepositoryError(RevtrackError):
    """No git metadata directory was found for the working directory."""


class VcsUnavailableError(RevtrackError):
    """A git query failed or the git executable could not be run."""


class NoChanges(RevtrackError):
    """Enumeration succeeded but nothing differs from the reference.

    Informational: the caller reports "nothing to review" rather than a failure.
    """
