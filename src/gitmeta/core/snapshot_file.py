"""
YAML file loading and saving for the config and snapshot files.

Loading is tolerant: a missing file and a malformed file both yield an
empty mapping, but the returned LoadResult says which one happened so
callers can log the difference.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

Snapshot = dict[str, dict[str, Any]]


class LoadStatus(str, Enum):
    """Outcome of loading a YAML mapping file."""

    LOADED = "loaded"
    MISSING = "missing"
    INVALID = "invalid"


@dataclass
class LoadResult:
    """Result of loading a YAML mapping file.

    Attributes:
        status: Whether the file was loaded, missing, or invalid.
        data: Loaded mapping; empty unless status is LOADED.
        error_message: Reason the file was rejected, if INVALID.
    """

    status: LoadStatus
    data: dict[str, Any] = field(default_factory=dict)
    error_message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == LoadStatus.LOADED


def load_yaml_mapping(path: Path | str) -> LoadResult:
    """
    Load a YAML file whose top level must be a mapping.

    An empty file loads as an empty mapping.

    Args:
        path: Path to the YAML file

    Returns:
        LoadResult; never raises for I/O or parse errors
    """
    path = Path(path)

    if not path.exists():
        logger.debug(f"File not found, using defaults: {path}")
        return LoadResult(status=LoadStatus.MISSING)

    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        return _invalid(path, f"Invalid UTF-8 encoding: {e}")
    except OSError as e:
        return _invalid(path, f"Error reading file: {e}")

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        return _invalid(path, f"Failed to parse YAML: {e}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        return _invalid(path, f"Expected a mapping at top level, got {type(data).__name__}")

    return LoadResult(status=LoadStatus.LOADED, data=data)


def _invalid(path: Path, message: str) -> LoadResult:
    logger.warning(f"Ignoring {path}: {message}")
    return LoadResult(status=LoadStatus.INVALID, error_message=message)


def load_snapshot(path: Path | str) -> Snapshot:
    """
    Load the snapshot mapping of path -> {field: value}.

    Entries whose value is not a mapping are dropped with a warning.
    """
    result = load_yaml_mapping(path)
    snapshot: Snapshot = {}

    for file_path, entry in result.data.items():
        if not isinstance(entry, dict):
            logger.warning(f"Skipping malformed snapshot entry for {file_path!r}")
            continue
        snapshot[str(file_path)] = {str(k): v for k, v in entry.items()}

    return snapshot


def dump_snapshot(snapshot: Snapshot) -> str:
    """Serialize a snapshot to YAML with sorted keys."""
    return yaml.safe_dump(
        snapshot,
        default_flow_style=False,
        sort_keys=True,
        allow_unicode=True,
    )


def save_snapshot(path: Path | str, snapshot: Snapshot) -> None:
    """Write the snapshot file, replacing any previous content."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_snapshot(snapshot), encoding="utf-8")
    logger.info(f"Wrote {len(snapshot)} entries to {path}")
