"""API key loading for Parley.

Keys are read from these places, highest priority first:
  1. Environment variables (already set in the shell)
  2. ~/.parley/keys.env
  3. .env in the current directory
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

# Directory for user-level Parley configuration
PARLEY_HOME = Path.home() / ".parley"
KEYS_FILE = PARLEY_HOME / "keys.env"


def load_keys_env(files: list[Path] | None = None) -> None:
    """Load KEY=VALUE files into os.environ without overwriting existing vars."""
    for env_file in files or [KEYS_FILE, Path.cwd() / ".env"]:
        if env_file.is_file():
            _load_env_file(env_file)


def _load_env_file(path: Path) -> None:
    """Parse a simple KEY=VALUE .env file and set vars that aren't already set."""
    try:
        for line in path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip().strip("'\"")
            if key and not os.environ.get(key):
                os.environ[key] = value
                logger.debug("Loaded %s from %s", key, path)
    except OSError:
        logger.debug("Could not read %s", path)


def has_key(env_var: str) -> bool:
    """Check whether the given API key variable is set after loading."""
    load_keys_env()
    return bool(os.environ.get(env_var))
