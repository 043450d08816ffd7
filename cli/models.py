"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class ListCommand:
    """List a remote directory."""

    path: str = "/"
    command: Literal["list"] = "list"


@dataclass(frozen=True)
class InfoCommand:
    """Show metadata of a remote entry."""

    path: str = "/"
    command: Literal["info"] = "info"


@dataclass(frozen=True)
class MkdirCommand:
    """Create a remote directory."""

    path: str
    command: Literal["mkdir"] = "mkdir"


@dataclass(frozen=True)
class UploadCommand:
    """Upload a local file to a remote path."""

    local_path: str
    remote_path: str
    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class DownloadCommand:
    """Download a remote file, optionally to a given local path."""

    remote_path: str
    local_path: str | None = None
    command: Literal["download"] = "download"


@dataclass(frozen=True)
class DeleteCommand:
    """Delete a remote file or directory."""

    path: str
    command: Literal["delete"] = "delete"


CommandRequest = (
    ListCommand
    | InfoCommand
    | MkdirCommand
    | UploadCommand
    | DownloadCommand
    | DeleteCommand
)
