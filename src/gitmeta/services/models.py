"""
MetaStore data models.

Contains dataclasses summarising store, apply and status operations.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class StoreResult:
    """Result of a store operation."""

    snapshot_path: Path
    tracked_files: int = 0
    refreshed_files: list[str] = field(default_factory=list)
    kept_files: int = 0
    pruned_files: list[str] = field(default_factory=list)
    excluded_files: int = 0
    total_entries: int = 0


@dataclass
class ApplyResult:
    """Result of an apply operation."""

    snapshot_path: Path
    applied_files: int = 0
    applied_fields: int = 0
    skipped_fields: int = 0


@dataclass
class SnapshotStatus:
    """Summary of the stored snapshot compared against the index."""

    snapshot_path: Path
    snapshot_exists: bool
    total_entries: int = 0
    field_counts: dict[str, int] = field(default_factory=dict)
    untracked_entries: list[str] = field(default_factory=list)
    unrecorded_files: int = 0
