"""Shared data type definitions (DirectoryEntry, DirectoryEntryType, Account)."""

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Optional


class DirectoryEntryType(IntEnum):
    """
    Kind of a directory entry as sent over the wire.
    """
    Unknown = 0
    Directory = 1
    File = 2


@dataclass(frozen=True)
class DirectoryEntry:
    """
    Metadata of a single file or directory below the shared root.

    ``size`` is only meaningful for files. Timestamps are timezone-aware UTC.
    ``name`` is None when the wire object carried no name.
    """
    name: Optional[str]
    type: DirectoryEntryType
    size: int
    ctime: datetime
    mtime: datetime

    @property
    def is_directory(self) -> bool:
        return self.type == DirectoryEntryType.Directory


@dataclass(frozen=True)
class Account:
    """
    Credentials of a single user, compared by exact equality.
    """
    name: str
    password: str

    def __repr__(self) -> str:
        return f"Account(name={self.name!r}, password='***')"
