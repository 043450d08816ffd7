"""Utility functions for CLI output."""

from typing import Iterable

from common.entry_codec import format_timestamp
from common.types import DirectoryEntry


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in bytes to human-readable format with appropriate unit.

    Uses binary units (1024-based) and automatically selects the most
    appropriate unit (B, KiB, MiB, GiB, TiB).

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string with size and unit (e.g., "1.50 MiB", "512 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"

    units = ['KiB', 'MiB', 'GiB', 'TiB']
    size = size_bytes / 1024.0

    for unit in units:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0

    return f"{size:.2f} PiB"


def entry_kind(entry: DirectoryEntry) -> str:
    return "dir" if entry.is_directory else "file"


def render_listing(entries: Iterable[DirectoryEntry]) -> str:
    """
    Render entries as an aligned text table with Name, Type, Size and
    Modified columns. Directories show no size.
    """
    rows = [("Name", "Type", "Size", "Modified")]
    for entry in entries:
        size = "" if entry.is_directory else format_file_size(entry.size)
        rows.append((entry.name or "/", entry_kind(entry), size, format_timestamp(entry.mtime)))

    widths = [max(len(row[i]) for row in rows) for i in range(4)]
    lines = []
    for name, kind, size, modified in rows:
        lines.append(
            f"{name.ljust(widths[0])}  {kind.ljust(widths[1])}  {size.rjust(widths[2])}  {modified}".rstrip()
        )
    return "\n".join(lines)


def render_entry(entry: DirectoryEntry) -> str:
    """Render a single entry as 'key: value' lines."""
    lines = [
        f"Name:     {entry.name or '/'}",
        f"Type:     {entry_kind(entry)}",
    ]
    if not entry.is_directory:
        lines.append(f"Size:     {format_file_size(entry.size)} ({entry.size} bytes)")
    lines.append(f"Created:  {format_timestamp(entry.ctime)}")
    lines.append(f"Modified: {format_timestamp(entry.mtime)}")
    return "\n".join(lines)
