"""
Configuration module for git-meta.

The config file is YAML with optional ``fields``, ``exclude`` and
``logging`` keys. A missing or unreadable file yields defaults: all known
fields, no excludes. Environment variables override selected values.
"""

import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from gitmeta.core.errors import ConfigError
from gitmeta.core.fields import FIELD_NAMES, MetadataField
from gitmeta.core.snapshot_file import LoadResult, LoadStatus, load_yaml_mapping

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "git-meta.config.yml"
DEFAULT_STORE_FILENAME = "git-meta.store.yml"

CONFIG_FILE_ENV = "GIT_META_CONFIG_FILE"
STORE_FILE_ENV = "GIT_META_STORE_FILE"


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "WARNING"
    format: str = "%(name)s - %(message)s"


@dataclass
class GitMetaConfig:
    """Main configuration class for git-meta."""

    fields: list[str] = field(default_factory=lambda: list(FIELD_NAMES))
    exclude: list[str] = field(default_factory=list)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    source: Optional[LoadResult] = field(default=None, repr=False, compare=False)

    @property
    def metadata_fields(self) -> list[MetadataField]:
        """Configured fields intersected with the known fields, config order kept."""
        result: list[MetadataField] = []
        for name in self.fields:
            parsed = MetadataField.parse(name)
            if parsed is None:
                logger.warning(f"Ignoring unknown metadata field in config: {name!r}")
                continue
            if parsed not in result:
                result.append(parsed)
        return result

    @classmethod
    def from_file(cls, path: Path | str) -> "GitMetaConfig":
        """
        Load configuration from a YAML file.

        Args:
            path: Path to the configuration file

        Returns:
            GitMetaConfig with loaded values, or defaults if the file is
            missing or cannot be parsed

        Raises:
            ConfigError: If the file parses but a key has the wrong type
        """
        result = load_yaml_mapping(path)
        if result.status == LoadStatus.INVALID:
            logger.warning(f"Using default configuration: {result.error_message}")
        config = cls._from_dict(result.data)
        config.source = result
        return config

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "GitMetaConfig":
        """Create GitMetaConfig from a dictionary."""
        config = cls()

        if "fields" in data:
            config.fields = _string_list(data["fields"], "fields")
        if "exclude" in data:
            config.exclude = _string_list(data["exclude"], "exclude")
        if "logging" in data:
            section = data["logging"] or {}
            if not isinstance(section, dict):
                raise ConfigError("'logging' must be a mapping")
            try:
                config.logging = LoggingConfig(**section)
            except TypeError as e:
                raise ConfigError(f"Invalid 'logging' section: {e}") from e

        return config

    def apply_env_overrides(self) -> "GitMetaConfig":
        """
        Apply environment variable overrides to the configuration.

        Supported variables:
            - GIT_META_LOGGING_LEVEL

        Returns:
            Self with environment overrides applied
        """
        env_mappings = {
            "GIT_META_LOGGING_LEVEL": ("logging", "level", str),
        }

        for env_var, (section, key, converter) in env_mappings.items():
            value = os.environ.get(env_var)
            if value is not None:
                section_obj = getattr(self, section)
                setattr(section_obj, key, converter(value))

        return self

    def to_dict(self) -> dict:
        """Convert configuration to a dictionary."""
        data = asdict(self)
        data.pop("source", None)
        return data

    def to_yaml(self) -> str:
        """Serialize configuration to YAML string."""
        return yaml.safe_dump(self.to_dict(), default_flow_style=False, sort_keys=False)


def _string_list(value: Any, key: str) -> list[str]:
    """Validate a config value as a list of strings. None means empty."""
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a list of strings")
    return list(value)


def resolve_config_path(root: Path, override: Optional[Path | str] = None) -> Path:
    """
    Resolve the config file location.

    Precedence: explicit override, GIT_META_CONFIG_FILE, then
    ``git-meta.config.yml`` at the repository root. Relative paths are
    taken relative to the repository root.
    """
    return _resolve(root, override, CONFIG_FILE_ENV, DEFAULT_CONFIG_FILENAME)


def resolve_store_path(root: Path, override: Optional[Path | str] = None) -> Path:
    """
    Resolve the snapshot file location.

    Precedence: explicit override, GIT_META_STORE_FILE, then
    ``git-meta.store.yml`` at the repository root.
    """
    return _resolve(root, override, STORE_FILE_ENV, DEFAULT_STORE_FILENAME)


def _resolve(root: Path, override: Optional[Path | str], env_var: str, default: str) -> Path:
    candidate = override if override is not None else os.environ.get(env_var) or default
    path = Path(candidate)
    if not path.is_absolute():
        path = Path(root) / path
    return path


def load_config(config_path: Path | str, apply_env: bool = True) -> GitMetaConfig:
    """
    Load configuration with optional environment variable overrides.

    Args:
        config_path: Path to the config file (need not exist)
        apply_env: Whether to apply environment variable overrides

    Returns:
        GitMetaConfig instance
    """
    config = GitMetaConfig.from_file(config_path)

    if apply_env:
        config.apply_env_overrides()

    return config
