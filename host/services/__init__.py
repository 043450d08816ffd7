"""Service layer for share operations."""

from host.services.share_service import DirectoryListing, FileContent, ShareService

__all__ = [
    "DirectoryListing",
    "FileContent",
    "ShareService",
]
