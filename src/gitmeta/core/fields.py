"""
Metadata field definitions.

Each known field maps to a getter reading it from an ``os.stat_result``.
Setters live on MetadataAccessor since they need the accessor's pending
timestamp state.
"""

import stat
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_NS_PER_US = 1000


class MetadataField(str, Enum):
    """Filesystem metadata fields that can be captured and restored."""

    MTIME = "mtime"
    ATIME = "atime"
    MODE = "mode"
    UID = "uid"
    GID = "gid"

    @classmethod
    def parse(cls, name: Any) -> "MetadataField | None":
        """Return the field for ``name`` or None if it is not a known field."""
        if isinstance(name, cls):
            return name
        try:
            return cls(name)
        except ValueError:
            return None


FIELD_NAMES: tuple[str, ...] = tuple(f.value for f in MetadataField)


def ns_to_datetime(ns: int) -> datetime:
    """Convert nanoseconds since the epoch to a UTC datetime (microsecond precision)."""
    return EPOCH + timedelta(microseconds=ns // _NS_PER_US)


def datetime_to_ns(value: datetime) -> int:
    """Convert a datetime to nanoseconds since the epoch.

    Naive datetimes are taken to be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return ((value - EPOCH) // timedelta(microseconds=1)) * _NS_PER_US


def coerce_timestamp_ns(value: Any) -> int:
    """
    Convert a stored timestamp value to nanoseconds since the epoch.

    Accepts datetimes (what YAML timestamps load as), ISO-8601 strings and
    epoch seconds as int/float.

    Raises:
        TypeError: If the value cannot be interpreted as a timestamp
    """
    if isinstance(value, datetime):
        return datetime_to_ns(value)
    if isinstance(value, str):
        return datetime_to_ns(datetime.fromisoformat(value))
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return int(round(value * 1_000_000)) * _NS_PER_US
    raise TypeError(f"Unsupported timestamp value: {value!r}")


def coerce_int(value: Any) -> int:
    """Convert a stored mode/uid/gid value to int."""
    if isinstance(value, bool):
        raise TypeError(f"Unsupported integer value: {value!r}")
    return int(value)


# Getter table: field -> function reading the value from a stat result
FIELD_GETTERS: dict[MetadataField, Callable[[Any], Any]] = {
    MetadataField.MTIME: lambda st: ns_to_datetime(st.st_mtime_ns),
    MetadataField.ATIME: lambda st: ns_to_datetime(st.st_atime_ns),
    MetadataField.MODE: lambda st: st.st_mode,
    MetadataField.UID: lambda st: st.st_uid,
    MetadataField.GID: lambda st: st.st_gid,
}


def permission_bits(mode: int) -> int:
    """Strip file type bits from a stored st_mode value."""
    return stat.S_IMODE(mode)


# YAML timestamps stop at microseconds; the exact value is kept next to them
# under "<field>_ns".
PRECISE_TIMESTAMP_KEYS: dict[MetadataField, str] = {
    MetadataField.MTIME: "mtime_ns",
    MetadataField.ATIME: "atime_ns",
}

PRECISE_TIMESTAMP_GETTERS: dict[MetadataField, Callable[[Any], int]] = {
    MetadataField.MTIME: lambda st: st.st_mtime_ns,
    MetadataField.ATIME: lambda st: st.st_atime_ns,
}


def is_precise_key(name: Any) -> bool:
    """Return True for the ``<field>_ns`` companion keys of a snapshot entry."""
    return name in PRECISE_TIMESTAMP_KEYS.values()


def precise_timestamp_ns(entry: dict[str, Any], field: MetadataField) -> int | None:
    """
    Return the exact nanosecond value stored for a timestamp field.

    The companion is only trusted while it agrees with the datetime value to
    the microsecond. A hand-edited datetime therefore wins over a stale
    companion. Returns None when there is no usable companion.
    """
    key = PRECISE_TIMESTAMP_KEYS.get(field)
    if key is None:
        return None
    ns = entry.get(key)
    if not isinstance(ns, int) or isinstance(ns, bool):
        return None
    try:
        coarse = coerce_timestamp_ns(entry[field.value])
    except (KeyError, TypeError, ValueError):
        return None
    if (ns // _NS_PER_US) * _NS_PER_US != coarse:
        return None
    return ns
