"""
MetadataAccessor: read and write metadata fields of a single file.
"""

import logging
import os
from pathlib import Path
from typing import Any, Callable, Iterable

from gitmeta.core.fields import (
    FIELD_GETTERS,
    PRECISE_TIMESTAMP_GETTERS,
    PRECISE_TIMESTAMP_KEYS,
    MetadataField,
    coerce_int,
    coerce_timestamp_ns,
    permission_bits,
)

logger = logging.getLogger(__name__)

# Index of each timestamp in the (atime, mtime) pair os.utime takes
_TIME_SLOTS = {MetadataField.ATIME: 0, MetadataField.MTIME: 1}


class MetadataAccessor:
    """
    Reads and writes the known metadata fields for one file path.

    The stat result is taken lazily on first access and cached for the
    lifetime of the instance, so every ``get`` reflects the file as it was
    before this accessor changed anything.

    Timestamps are written through ``os.utime``, which always sets atime and
    mtime together. The accessor keeps a pending (atime, mtime) pair seeded
    from the original stat and updates one slot per ``set``, so restoring
    mtime leaves atime alone and restoring both in one pass keeps both.
    """

    def __init__(self, path: Path | str):
        self._path = Path(path)
        self._stat: os.stat_result | None = None
        self._times_ns: list[int] | None = None
        self._setters: dict[MetadataField, Callable[[Any], None]] = {
            MetadataField.MTIME: self._set_mtime,
            MetadataField.ATIME: self._set_atime,
            MetadataField.MODE: self._set_mode,
            MetadataField.UID: self._set_uid,
            MetadataField.GID: self._set_gid,
        }

    @property
    def path(self) -> Path:
        return self._path

    @property
    def stat(self) -> os.stat_result:
        """Cached stat result. Raises OSError if the file cannot be stat'ed."""
        if self._stat is None:
            self._stat = os.stat(self._path)
        return self._stat

    def get(self, field: MetadataField | str) -> Any:
        """
        Get the current value of one field.

        Returns:
            UTC datetime for mtime/atime, int for mode/uid/gid,
            None for unknown field names
        """
        parsed = MetadataField.parse(field)
        if parsed is None:
            return None
        return FIELD_GETTERS[parsed](self.stat)

    def set(self, field: MetadataField | str, value: Any, ns: int | None = None) -> None:
        """
        Apply a value for one field to the file.

        Args:
            field: Field to set
            value: Value as stored in a snapshot
            ns: Exact nanoseconds for mtime/atime; used instead of ``value``

        Raises:
            ValueError: If the field is not a known metadata field
            OSError: If the underlying utime/chmod/chown call fails
        """
        parsed = MetadataField.parse(field)
        if parsed is None:
            raise ValueError(f"Unknown metadata field: {field!r}")
        logger.debug(f"Setting {parsed.value}={value!r} on {self._path}")
        if ns is not None and parsed in _TIME_SLOTS:
            self._write_time(_TIME_SLOTS[parsed], ns)
            return
        self._setters[parsed](value)

    def to_metadata(self, fields: Iterable[MetadataField | str]) -> dict[str, Any]:
        """Map each requested field name to its current value."""
        metadata: dict[str, Any] = {}
        for field in fields:
            parsed = MetadataField.parse(field)
            if parsed is None:
                continue
            metadata[parsed.value] = self.get(parsed)
        return metadata

    def to_snapshot_entry(self, fields: Iterable[MetadataField | str]) -> dict[str, Any]:
        """
        Build a snapshot entry: ``to_metadata`` plus the exact ``<field>_ns``
        integer for each timestamp, which a YAML timestamp cannot hold.
        """
        entry = self.to_metadata(fields)
        for field, key in PRECISE_TIMESTAMP_KEYS.items():
            if field.value in entry:
                entry[key] = PRECISE_TIMESTAMP_GETTERS[field](self.stat)
        return entry

    def _pending_times(self) -> list[int]:
        if self._times_ns is None:
            self._times_ns = [self.stat.st_atime_ns, self.stat.st_mtime_ns]
        return self._times_ns

    def _write_time(self, slot: int, ns: int) -> None:
        times = self._pending_times()
        times[slot] = ns
        os.utime(self._path, ns=(times[0], times[1]))

    def _set_atime(self, value: Any) -> None:
        self._write_time(_TIME_SLOTS[MetadataField.ATIME], coerce_timestamp_ns(value))

    def _set_mtime(self, value: Any) -> None:
        self._write_time(_TIME_SLOTS[MetadataField.MTIME], coerce_timestamp_ns(value))

    def _set_mode(self, value: Any) -> None:
        os.chmod(self._path, permission_bits(coerce_int(value)))

    def _set_uid(self, value: Any) -> None:
        os.chown(self._path, coerce_int(value), -1)

    def _set_gid(self, value: Any) -> None:
        os.chown(self._path, -1, coerce_int(value))
