import copy
import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "default_branch": "origin/HEAD",
    "store": "json",  # "json" = <git-dir>/<state_file>; "noop" = in-memory only
    "state_file": "code-review-state.json",
    "icons": {
        "reviewed": "✓",
        "unreviewed": " ",
    },
    "status_icons": {},  # git status letter -> display string, e.g. {"?": "U"}
}

# Dict-valued keys merge key by key instead of being replaced wholesale.
_MERGED_KEYS = ("icons", "status_icons")


def load_config(config_path: str = ".revtrack.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .revtrack.yml in the current directory
      3. CLI argument overrides
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ValueError(f"Config file {config_path} must contain a mapping, got {type(file_config).__name__}.")
        for key, value in file_config.items():
            if key in _MERGED_KEYS and isinstance(value, dict):
                config[key].update(value)
            else:
                config[key] = value

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    if config["store"] not in ("json", "noop"):
        raise ValueError(f"Unknown store: {config['store']!r}. Choose 'json' or 'noop'.")

    # Resolve the git executable from the environment
    config["git_executable"] = os.environ.get("REVTRACK_GIT") or "git"

    return config
