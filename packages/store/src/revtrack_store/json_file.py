"""JsonFileStore: review state in a JSON file inside the git directory.

Default location is `<git-dir>/code-review-state.json`. Keeping the file in
the git metadata directory means it survives working-directory changes and
is never picked up by `git status`.

Data format:
  {"branch": "origin/main", "mode": "branch",
   "reviewed": [{"path": "src/app.py", "diff_hash": "9e107d9d..."}, ...]}

Older versions wrote `reviewed` as a list of bare path strings. Those are
read as entries with no diff hash.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path

from revtrack_store.base import BaseStore
from revtrack_store.models import LegacyEntry, PersistedRecord, ReviewedEntry

logger = logging.getLogger(__name__)

STATE_FILENAME = "code-review-state.json"


class JsonFileStore(BaseStore):
    """Stores a single PersistedRecord as JSON. Last writer wins."""

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def save(self, record: PersistedRecord) -> bool:
        """Write the record via a temporary sibling file and an atomic rename."""
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            tmp_path.write_text(json.dumps(self._to_dict(record), indent=2), encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp_path.unlink(missing_ok=True)
            # Never block review operations because persistence failed.
            logger.warning("JsonFileStore.save() failed for %s (%s): %s", self._path, type(e).__name__, e)
            return False
        return True

    def load(self) -> PersistedRecord | None:
        try:
            content = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("JsonFileStore.load() could not read %s: %s", self._path, e)
            return None

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning("Ignoring malformed review state in %s: %s", self._path, e)
            return None

        return self._from_dict(data)

    @staticmethod
    def _to_dict(record: PersistedRecord) -> dict:
        return {
            "branch": record.branch,
            "mode": record.mode,
            "reviewed": [{"path": e.path, "diff_hash": e.diff_hash} for e in record.reviewed],
        }

    @staticmethod
    def _parse_entry(item) -> ReviewedEntry | LegacyEntry | None:
        if isinstance(item, str):
            return LegacyEntry(path=item)
        if isinstance(item, dict) and isinstance(item.get("path"), str):
            diff_hash = item.get("diff_hash")
            return ReviewedEntry(path=item["path"], diff_hash=diff_hash if isinstance(diff_hash, str) else None)
        return None

    @classmethod
    def _from_dict(cls, d) -> PersistedRecord | None:
        if not isinstance(d, dict) or not isinstance(d.get("branch"), str):
            return None
        raw_reviewed = d.get("reviewed", [])
        if not isinstance(raw_reviewed, list):
            return None

        reviewed: list[ReviewedEntry] = []
        for item in raw_reviewed:
            entry = cls._parse_entry(item)
            if isinstance(entry, LegacyEntry):
                entry = entry.normalize()
            if entry is not None:
                reviewed.append(entry)

        return PersistedRecord(branch=d["branch"], mode=d.get("mode") or "branch", reviewed=reviewed)
