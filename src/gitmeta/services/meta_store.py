"""
MetaStore: capture and restore metadata for tracked files.
"""

import logging
from collections import Counter
from pathlib import Path
from typing import Optional

from gitmeta.core.accessor import MetadataAccessor
from gitmeta.core.config import GitMetaConfig, load_config
from gitmeta.core.exclude import ExcludeMatcher
from gitmeta.core.fields import MetadataField, is_precise_key, precise_timestamp_ns
from gitmeta.core.snapshot_file import Snapshot, load_snapshot, save_snapshot
from gitmeta.infrastructure.git_client import GitClientInterface

from .models import ApplyResult, SnapshotStatus, StoreResult

logger = logging.getLogger(__name__)

# Ownership before mode: chown may clear setuid/setgid bits.
# Timestamps last: chmod/chown only touch ctime.
APPLY_ORDER: tuple[MetadataField, ...] = (
    MetadataField.UID,
    MetadataField.GID,
    MetadataField.MODE,
    MetadataField.ATIME,
    MetadataField.MTIME,
)


class MetaStore:
    """
    Orchestrates metadata snapshots for a git checkout.

    On construction the config and the previous snapshot are loaded; both
    fall back to defaults/empty when their files are missing or unreadable.
    ``store`` and ``apply`` each make one pass over the files.
    """

    def __init__(
        self,
        root_path: Path | str,
        git_client: GitClientInterface,
        config_path: Path | str,
        store_path: Path | str,
        config: Optional[GitMetaConfig] = None,
    ):
        """
        Initialize the store.

        Args:
            root_path: Repository root; snapshot paths are relative to it
            git_client: Source of tracked and staged file lists
            config_path: Config file location (need not exist)
            store_path: Snapshot file location (need not exist)
            config: Preloaded config; loaded from config_path when None
        """
        self._root_path = Path(root_path)
        self._git = git_client
        self._config_path = Path(config_path)
        self._store_path = Path(store_path)

        self._config = config if config is not None else load_config(self._config_path)
        self._store: Snapshot = load_snapshot(self._store_path)
        self._metadata: list[MetadataField] = self._config.metadata_fields
        self._exclude = ExcludeMatcher(self._config.exclude)
        self._snapshot_rel_path = self._relative_to_root(self._store_path)

        logger.debug(
            f"Loaded {len(self._store)} snapshot entries from {self._store_path}; "
            f"fields={[f.value for f in self._metadata]}, exclude={self._exclude.patterns}"
        )

    @property
    def config(self) -> GitMetaConfig:
        return self._config

    @property
    def snapshot(self) -> Snapshot:
        """The in-memory snapshot (as loaded, or as last stored)."""
        return self._store

    @property
    def metadata_fields(self) -> list[MetadataField]:
        return list(self._metadata)

    @property
    def store_path(self) -> Path:
        return self._store_path

    def _relative_to_root(self, path: Path) -> Optional[str]:
        try:
            return path.resolve().relative_to(self._root_path.resolve()).as_posix()
        except ValueError:
            return None

    def is_excluded(self, file_path: str) -> bool:
        """
        Check whether a path is excluded from the snapshot.

        True if any configured glob matches, and always for the snapshot
        file itself since every store rewrites it.
        """
        if self._snapshot_rel_path is not None and file_path == self._snapshot_rel_path:
            return True
        return self._exclude.matches(file_path)

    def store(self) -> StoreResult:
        """
        Capture metadata for tracked files and write the snapshot file.

        Files staged for commit, and files with no snapshot entry yet, get
        freshly captured values. Every other tracked file keeps the values
        recorded earlier. Entries for untracked or excluded paths are
        dropped.

        Returns:
            StoreResult summarising the pass

        Raises:
            GitCommandError: If listing files fails
            OSError: If a tracked file cannot be stat'ed
        """
        result = StoreResult(snapshot_path=self._store_path)

        files = self._git.list_tracked_files()
        result.tracked_files = len(files)

        pruned = sorted(f for f in self._store if f not in files)
        for file_path in pruned:
            del self._store[file_path]
        result.pruned_files = pruned
        if pruned:
            logger.info(f"Pruned {len(pruned)} entries no longer tracked")

        candidates = sorted(f for f in files if not self.is_excluded(f))
        result.excluded_files = len(files) - len(candidates)

        data = {
            file_path: MetadataAccessor(self._root_path / file_path).to_snapshot_entry(
                self._metadata
            )
            for file_path in candidates
        }

        modified = self._git.list_staged_files()

        for file_path, metadata in data.items():
            if file_path in modified or file_path not in self._store:
                self._store[file_path] = metadata
                result.refreshed_files.append(file_path)
            else:
                result.kept_files += 1

        self._store = {
            file_path: entry
            for file_path, entry in self._store.items()
            if file_path in files and not self.is_excluded(file_path)
        }
        result.total_entries = len(self._store)

        save_snapshot(self._store_path, self._store)
        logger.info(
            f"Stored metadata: {len(result.refreshed_files)} refreshed, "
            f"{result.kept_files} kept, {result.excluded_files} excluded"
        )
        return result

    def apply(self) -> ApplyResult:
        """
        Restore every recorded field onto the files in the snapshot.

        Paths are not checked against the current index; the first failing
        file aborts the pass. Timestamps are restored from their
        ``<field>_ns`` companion while it agrees with the datetime value.

        Returns:
            ApplyResult summarising the pass

        Raises:
            OSError: If a file is missing or a metadata call is refused
        """
        result = ApplyResult(snapshot_path=self._store_path)

        for file_path, entry in self._store.items():
            accessor = MetadataAccessor(self._root_path / file_path)

            for field_name in entry:
                if MetadataField.parse(field_name) is None and not is_precise_key(field_name):
                    logger.warning(f"Skipping unknown field {field_name!r} for {file_path}")
                    result.skipped_fields += 1

            for field in APPLY_ORDER:
                if field.value not in entry:
                    continue
                accessor.set(field, entry[field.value], ns=precise_timestamp_ns(entry, field))
                result.applied_fields += 1

            result.applied_files += 1

        logger.info(
            f"Applied {result.applied_fields} fields to {result.applied_files} files"
        )
        return result

    def status(self) -> SnapshotStatus:
        """
        Summarise the snapshot against the current index without touching files.

        Raises:
            GitCommandError: If listing files fails
        """
        files = self._git.list_tracked_files()
        field_counts: Counter[str] = Counter()
        for entry in self._store.values():
            field_counts.update(name for name in entry if not is_precise_key(name))

        recorded = set(self._store)
        unrecorded = [f for f in files if f not in recorded and not self.is_excluded(f)]

        return SnapshotStatus(
            snapshot_path=self._store_path,
            snapshot_exists=self._store_path.exists(),
            total_entries=len(self._store),
            field_counts=dict(sorted(field_counts.items())),
            untracked_entries=sorted(f for f in self._store if f not in files),
            unrecorded_files=len(unrecorded),
        )


def create_meta_store(
    root_path: Path | str,
    git_client: GitClientInterface,
    config_path: Path | str,
    store_path: Path | str,
    config: Optional[GitMetaConfig] = None,
) -> MetaStore:
    """Factory function to create a meta store."""
    return MetaStore(root_path, git_client, config_path, store_path, config=config)
