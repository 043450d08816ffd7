"""Share service: the five operations on the shared root."""

import mimetypes
import os
import shutil
import stat
from dataclasses import dataclass
from typing import List, Optional, Union

import aiofiles
import aiofiles.os

from common import entry_codec
from common.constants import DEFAULT_FILE_CONTENT_TYPE
from common.logging_config import get_logger
from common.types import DirectoryEntry
from host.access_control import RequestContext
from host.exceptions import (
    EntryConflictError,
    EntryExistsError,
    EntryNotFoundError,
    IsADirectoryConflictError,
)
from host.path_resolver import PathResolver, ResolvedPath

logger = get_logger(__name__)

_lstat = aiofiles.os.wrap(os.lstat)
_rmtree = aiofiles.os.wrap(shutil.rmtree)


@dataclass(frozen=True)
class DirectoryListing:
    """Children of a directory, in listing order."""
    entries: List[DirectoryEntry]

    @property
    def is_empty(self) -> bool:
        return not self.entries


@dataclass(frozen=True)
class FileContent:
    """Full content of a file."""
    name: str
    data: bytes
    content_type: str

    @property
    def is_empty(self) -> bool:
        return not self.data


class ShareService:
    """
    Executes list/read, info, create-directory, write-file and delete on top
    of a PathResolver. Every path goes through the resolver, and its final
    segment through the filename sanitizer, before the filesystem is touched.
    """

    def __init__(self, resolver: PathResolver):
        self.resolver = resolver

    async def _stat(self, resolved: ResolvedPath) -> Optional[os.stat_result]:
        try:
            return await aiofiles.os.stat(resolved.absolute)
        except (FileNotFoundError, NotADirectoryError):
            return None

    async def _ensure_parent(self, resolved: ResolvedPath) -> None:
        try:
            await aiofiles.os.makedirs(resolved.parent, exist_ok=True)
        except (FileExistsError, NotADirectoryError):
            raise EntryConflictError(resolved.request_path, "Parent path is not a directory")

    async def read(self, requested: str, context: RequestContext) -> Union[DirectoryListing, FileContent]:
        """
        List a directory or read a whole file.

        Raises:
            PathOutsideRootError: If the path escapes the shared root
                or its final segment is empty after sanitization
            EntryNotFoundError: If nothing exists at the path
        """
        resolved = self.resolver.sanitize(self.resolver.resolve(requested))

        metadata = await self._stat(resolved)
        if metadata is None:
            raise EntryNotFoundError(resolved.request_path)

        if stat.S_ISDIR(metadata.st_mode):
            entries = []
            for name in await aiofiles.os.listdir(resolved.absolute):
                try:
                    child = await aiofiles.os.stat(os.path.join(resolved.absolute, name))
                except (FileNotFoundError, NotADirectoryError):
                    # vanished meanwhile, or a dangling symlink
                    continue
                entries.append(entry_codec.encode(child, name))

            logger.debug(f"Listed {resolved.request_path}: {len(entries)} entries [user={context.principal}]")
            return DirectoryListing(entries=entry_codec.sort_entries(entries))

        async with aiofiles.open(resolved.absolute, 'rb') as f:
            data = await f.read()

        content_type, _ = mimetypes.guess_type(resolved.name)
        logger.debug(f"Read {resolved.request_path}: {len(data)} bytes [user={context.principal}]")
        return FileContent(
            name=resolved.name,
            data=data,
            content_type=content_type or DEFAULT_FILE_CONTENT_TYPE,
        )

    async def info(self, requested: str, context: RequestContext) -> DirectoryEntry:
        """
        Return the metadata of an entry without listing or reading it.

        Raises:
            PathOutsideRootError: If the path escapes the shared root
                or its final segment is empty after sanitization
            EntryNotFoundError: If nothing exists at the path
        """
        resolved = self.resolver.sanitize(self.resolver.resolve(requested))

        metadata = await self._stat(resolved)
        if metadata is None:
            raise EntryNotFoundError(resolved.request_path)

        return entry_codec.encode(metadata, resolved.name)

    async def create_directory(self, requested: str, context: RequestContext) -> DirectoryEntry:
        """
        Create a directory, including missing intermediate directories.

        The final directory is created exclusively, so of two concurrent
        requests for the same path exactly one succeeds.

        Raises:
            PathOutsideRootError: If the path escapes the root or is the root
            EntryExistsError: If an entry already exists at the path
            EntryConflictError: If a file blocks an intermediate segment
        """
        resolved = self.resolver.resolve_leaf(requested)

        if await self._stat(resolved) is not None:
            raise EntryExistsError(resolved.request_path)

        await self._ensure_parent(resolved)
        try:
            await aiofiles.os.mkdir(resolved.absolute)
        except FileExistsError:
            raise EntryExistsError(resolved.request_path)

        logger.info(f"Created directory {resolved.request_path} [user={context.principal}]")
        metadata = await aiofiles.os.stat(resolved.absolute)
        return entry_codec.encode(metadata, resolved.name)

    async def write_file(self, requested: str, data: bytes, context: RequestContext) -> DirectoryEntry:
        """
        Write ``data`` as the full content of a file, replacing an existing
        file and creating missing parent directories.

        Raises:
            PathOutsideRootError: If the path escapes the root or is the root
            IsADirectoryConflictError: If a directory occupies the path
            EntryConflictError: If a file blocks an intermediate segment
        """
        resolved = self.resolver.resolve_leaf(requested)

        metadata = await self._stat(resolved)
        if metadata is not None and stat.S_ISDIR(metadata.st_mode):
            raise IsADirectoryConflictError(resolved.request_path)

        await self._ensure_parent(resolved)
        try:
            async with aiofiles.open(resolved.absolute, 'wb') as f:
                await f.write(data)
        except IsADirectoryError:
            raise IsADirectoryConflictError(resolved.request_path)

        logger.info(f"Wrote {resolved.request_path}: {len(data)} bytes [user={context.principal}]")
        metadata = await aiofiles.os.stat(resolved.absolute)
        return entry_codec.encode(metadata, resolved.name)

    async def delete(self, requested: str, context: RequestContext) -> DirectoryEntry:
        """
        Remove a file, or a directory with all of its contents.

        Symbolic links are removed themselves, never followed.

        Returns:
            The entry as captured before it was removed

        Raises:
            PathOutsideRootError: If the path escapes the root or is the root
            EntryNotFoundError: If nothing exists at the path
        """
        resolved = self.resolver.resolve_leaf(requested)

        try:
            link_metadata = await _lstat(resolved.absolute)
        except (FileNotFoundError, NotADirectoryError):
            raise EntryNotFoundError(resolved.request_path)

        metadata = await self._stat(resolved) or link_metadata
        snapshot = entry_codec.encode(metadata, resolved.name)

        if stat.S_ISDIR(link_metadata.st_mode):
            await _rmtree(resolved.absolute)
        else:
            await aiofiles.os.remove(resolved.absolute)

        logger.info(f"Deleted {resolved.request_path} [user={context.principal}]")
        return snapshot
