"""Pydantic schema of the DirectoryEntry wire object."""

from typing import Optional

from pydantic import BaseModel, Field

from common.types import DirectoryEntryType


class DirectoryEntryPayload(BaseModel):
    """JSON representation of a DirectoryEntry."""
    name: Optional[str] = None
    type: DirectoryEntryType = DirectoryEntryType.Unknown
    size: int = Field(default=0, ge=0)
    ctime: str
    mtime: str
