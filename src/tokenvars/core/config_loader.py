"""
Configuration and token document loading.

Reads the ``[export]`` and ``[import]`` tables of a ``tokenvars.toml``
file into validated config models, and loads token documents from JSON
or YAML.

Default location: {project_root}/tokenvars.toml
"""

from __future__ import annotations

import json
import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .errors import ConfigError
from .ir.config import ExportConfig, ImportConfig

logger = logging.getLogger(__name__)

CONFIG_FILE = "tokenvars.toml"


@dataclass
class ProjectConfig:
    """Settings loaded from tokenvars.toml."""

    export: ExportConfig = field(default_factory=ExportConfig)
    import_: ImportConfig = field(default_factory=ImportConfig)


# =============================================================================
# Config
# =============================================================================


def get_config_path(project_root: Path) -> Path:
    """Get the tokenvars.toml file path."""
    return project_root / CONFIG_FILE


def parse_config_data(data: dict[str, Any]) -> ProjectConfig:
    """Build a ProjectConfig from raw TOML data."""
    try:
        export_config = ExportConfig(**data.get("export", {}))
        import_config = ImportConfig(**data.get("import", {}))
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
    except TypeError as e:
        raise ConfigError(f"Invalid configuration section: {e}") from e
    return ProjectConfig(export=export_config, import_=import_config)


def load_config(path: Path, *, use_defaults: bool = True) -> ProjectConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to a TOML file, or a directory containing tokenvars.toml.
        use_defaults: If True, return defaults when the file doesn't exist.

    Raises:
        ConfigError: If the file is missing (when use_defaults=False) or invalid.
    """
    if path.is_dir():
        path = get_config_path(path)

    if not path.exists():
        if use_defaults:
            logger.debug("No %s found, using defaults", path)
            return ProjectConfig()
        raise ConfigError(f"Config not found: {path}")

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    return parse_config_data(data)


# =============================================================================
# Token documents
# =============================================================================


def load_token_document(path: Path) -> dict[str, Any]:
    """Load a token document from ``.json``, ``.yaml`` or ``.yml``.

    Raises:
        ConfigError: If the file is missing, unparseable, or not an object.
    """
    if not path.exists():
        raise ConfigError(f"Token file not found: {path}")

    content = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(content)
        else:
            data = json.loads(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Token document in {path} must be an object")
    return data
