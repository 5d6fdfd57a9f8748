"""TOML configuration loader.

Loads the model connection settings and assistant presentation settings
from defaults.toml, or from a user-supplied file with the same layout.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import ValidationError

from parley.schemas.config import AssistantConfig, AssistantSettings, ModelConfig

# Default config directory relative to the parley package
CONFIG_DIR = Path(__file__).parent.parent / "config"


def load_config(config_path: Path | None = None) -> AssistantConfig:
    """Load the assistant configuration from a TOML file.

    Args:
        config_path: Path to a TOML file. Defaults to parley/config/defaults.toml.

    Returns:
        AssistantConfig with values from the TOML file.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ValueError: If the [model] section is missing or any value is invalid.
    """
    path = config_path or CONFIG_DIR / "defaults.toml"
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    with open(path, "rb") as f:
        raw = tomllib.load(f)

    model_section = raw.get("model")
    if not model_section or not isinstance(model_section, dict):
        raise ValueError(f"No [model] section found in {path}")

    assistant_section = raw.get("assistant", {})
    if not isinstance(assistant_section, dict):
        raise ValueError(f"[assistant] must be a table in {path}")

    try:
        return AssistantConfig(
            model=ModelConfig(**model_section),
            assistant=AssistantSettings(**assistant_section),
        )
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {path}: {e}") from e
