"""Conversion between filesystem metadata, DirectoryEntry and its wire form."""

import os
import stat
from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional

from common.schemas import DirectoryEntryPayload
from common.types import DirectoryEntry, DirectoryEntryType


def to_display_name(name: Optional[str]) -> Optional[str]:
    """
    Make a filesystem name safe to send as UTF-8.

    Bytes that are not valid UTF-8 (surrogate escaped by ``os.fsdecode``)
    become U+FFFD.
    """
    if name is None:
        return None
    return os.fsdecode(name).encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def to_utc(timestamp: float) -> datetime:
    """
    Convert a POSIX timestamp into an aware UTC datetime.

    Args:
        timestamp: Seconds since the epoch, as found in ``os.stat_result``

    Returns:
        Datetime in UTC
    """
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def format_timestamp(value: datetime) -> str:
    """
    Format a datetime as UTC ISO-8601 with millisecond precision.

    Naive values are taken as UTC. The result ends with ``Z``,
    e.g. ``2024-01-01T12:00:00.123Z``.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp from the wire into an aware UTC datetime.

    Raises:
        ValueError: If the value is not a valid ISO-8601 timestamp
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def encode(metadata: os.stat_result, name: Optional[str]) -> DirectoryEntry:
    """
    Build a DirectoryEntry from filesystem metadata.

    Anything that is not a directory is reported as a file.

    Args:
        metadata: Result of ``stat`` for the entry
        name: Entry name to report, as returned by the filesystem

    Returns:
        DirectoryEntry with UTC timestamps
    """
    if stat.S_ISDIR(metadata.st_mode):
        entry_type = DirectoryEntryType.Directory
    else:
        entry_type = DirectoryEntryType.File

    return DirectoryEntry(
        name=to_display_name(name),
        type=entry_type,
        size=metadata.st_size,
        ctime=to_utc(metadata.st_ctime),
        mtime=to_utc(metadata.st_mtime),
    )


def encode_path(path: str, metadata: os.stat_result, name: Optional[str] = None) -> DirectoryEntry:
    """
    Build a DirectoryEntry for ``path``, naming it after its last segment
    unless ``name`` is given explicitly.
    """
    if name is None:
        name = os.path.basename(os.path.normpath(path))
    return encode(metadata, name)


def to_wire(entry: DirectoryEntry) -> dict:
    """
    Serialize a DirectoryEntry into a JSON-compatible dict.

    The ``name`` key is omitted when the entry has no name.
    """
    payload = DirectoryEntryPayload(
        name=entry.name,
        type=entry.type,
        size=entry.size,
        ctime=format_timestamp(entry.ctime),
        mtime=format_timestamp(entry.mtime),
    )
    return payload.model_dump(mode="json", exclude_none=True)


def decode(wire_object: Mapping[str, Any]) -> DirectoryEntry:
    """
    Deserialize a wire object into a DirectoryEntry.

    Raises:
        ValueError: If the object does not match the DirectoryEntry schema
    """
    payload = DirectoryEntryPayload.model_validate(wire_object)
    return DirectoryEntry(
        name=payload.name,
        type=DirectoryEntryType(payload.type),
        size=payload.size,
        ctime=parse_timestamp(payload.ctime),
        mtime=parse_timestamp(payload.mtime),
    )


def listing_sort_key(entry: DirectoryEntry) -> tuple:
    """Directories first, then case-insensitive by name."""
    group = 0 if entry.type == DirectoryEntryType.Directory else 1
    return group, (entry.name or "").strip().lower()


def sort_entries(entries: Iterable[DirectoryEntry]) -> List[DirectoryEntry]:
    """
    Order entries for a directory listing.

    All directories come before all files; each group is sorted
    alphabetically by case-insensitive name. The sort is stable.
    """
    return sorted(entries, key=listing_sort_key)
