"""Configuration loading from record_factory.toml."""

import tomllib
from pathlib import Path

from pydantic import ValidationError

from record_factory.config.models import AnalysisSettings, DatabaseProfile, FactoryConfig

CONFIG_FILE_NAME = "record_factory.toml"


def load_config(config_path: Path | None = None) -> FactoryConfig:
    """Load record-factory configuration from a TOML file.

    Args:
        config_path: Path to the config file (default:
            ``record_factory.toml`` in the current working directory).

    Returns:
        FactoryConfig with analysis settings and all profiles

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config format is invalid
    """
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILE_NAME

    if not config_path.exists():
        raise FileNotFoundError(
            f"record-factory config not found: {config_path}\n"
            f"Create {CONFIG_FILE_NAME} with [analysis] and [profiles.<name>] tables."
        )

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    try:
        # Parse profiles
        profiles = {}
        for name, profile_data in data.get("profiles", {}).items():
            profiles[name] = DatabaseProfile(**profile_data)

        return FactoryConfig(
            analysis=AnalysisSettings(**data.get("analysis", {})),
            profiles=profiles,
        )
    except (TypeError, ValidationError) as e:
        raise ValueError(f"Invalid config in {config_path}: {e}") from e
