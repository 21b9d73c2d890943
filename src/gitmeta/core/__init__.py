"""
Core Layer - Metadata fields, file accessor, config, snapshot files and exclude globs.
"""

from gitmeta.core.accessor import MetadataAccessor
from gitmeta.core.config import (
    DEFAULT_CONFIG_FILENAME,
    DEFAULT_STORE_FILENAME,
    GitMetaConfig,
    LoggingConfig,
    load_config,
    resolve_config_path,
    resolve_store_path,
)
from gitmeta.core.errors import ConfigError, GitCommandError, GitMetaError
from gitmeta.core.exclude import ExcludeMatcher, expand_braces
from gitmeta.core.fields import FIELD_NAMES, MetadataField
from gitmeta.core.snapshot_file import (
    LoadResult,
    LoadStatus,
    Snapshot,
    dump_snapshot,
    load_snapshot,
    load_yaml_mapping,
    save_snapshot,
)

__all__ = [
    # Fields
    "MetadataField",
    "FIELD_NAMES",
    # Accessor
    "MetadataAccessor",
    # Config
    "GitMetaConfig",
    "LoggingConfig",
    "load_config",
    "resolve_config_path",
    "resolve_store_path",
    "DEFAULT_CONFIG_FILENAME",
    "DEFAULT_STORE_FILENAME",
    # Errors
    "GitMetaError",
    "ConfigError",
    "GitCommandError",
    # Exclude globs
    "ExcludeMatcher",
    "expand_braces",
    # Snapshot files
    "Snapshot",
    "LoadResult",
    "LoadStatus",
    "load_yaml_mapping",
    "load_snapshot",
    "dump_snapshot",
    "save_snapshot",
]
