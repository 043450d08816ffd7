"""Maps request paths onto the shared root and proves containment."""

import os
import re
from dataclasses import dataclass
from typing import Optional

from common.paths import normalize_path
from host.exceptions import PathOutsideRootError

MAX_FILENAME_BYTES = 255

_ILLEGAL_CHARACTERS = re.compile(r'[/?<>\\:*|"]')
_CONTROL_CHARACTERS = re.compile(r'[\x00-\x1f\x80-\x9f]')
_RESERVED_NAMES = re.compile(r'^\.+$')
_WINDOWS_RESERVED_NAMES = re.compile(r'^(con|prn|aux|nul|com[0-9]|lpt[0-9])(\..*)?$', re.IGNORECASE)
_WINDOWS_TRAILING = re.compile(r'[. ]+$')


def sanitize_filename(name: str) -> str:
    """
    Strip characters and names that are not portable as a file name.

    Removes path separators and other characters reserved on common
    filesystems, control characters, names made only of dots, Windows
    device names and trailing dots/spaces, then truncates the result to
    255 bytes of UTF-8.

    Args:
        name: A single path segment

    Returns:
        The sanitized segment, possibly empty
    """
    name = _ILLEGAL_CHARACTERS.sub('', name)
    name = _CONTROL_CHARACTERS.sub('', name)
    name = _RESERVED_NAMES.sub('', name)
    name = _WINDOWS_RESERVED_NAMES.sub('', name)
    name = _WINDOWS_TRAILING.sub('', name)

    encoded = name.encode('utf-8')
    if len(encoded) > MAX_FILENAME_BYTES:
        name = encoded[:MAX_FILENAME_BYTES].decode('utf-8', errors='ignore')
    return name


@dataclass(frozen=True)
class ResolvedPath:
    """
    A request path together with the absolute location it maps to.
    """
    request_path: str
    absolute: str
    is_root: bool

    @property
    def name(self) -> Optional[str]:
        """Name reported for the entry; the root has none."""
        if self.is_root:
            return None
        return os.path.basename(self.absolute)

    @property
    def parent(self) -> str:
        return os.path.dirname(self.absolute)


class PathResolver:
    """
    Turns client supplied paths into absolute paths below the shared root.

    The resolver never touches the filesystem. Containment is checked
    lexically: ``..`` segments are collapsed, symlinks are not followed.
    """

    def __init__(self, root: str):
        self.root = os.path.abspath(root)
        self._prefix = self.root if self.root.endswith(os.sep) else self.root + os.sep

    def contains(self, absolute: str) -> bool:
        """True if ``absolute`` is the root or a strict descendant of it."""
        return absolute == self.root or absolute.startswith(self._prefix)

    def resolve(self, requested: str) -> ResolvedPath:
        """
        Normalize ``requested`` and map it below the shared root.

        Raises:
            PathOutsideRootError: If the path escapes the root
        """
        request_path = normalize_path(requested)

        if '\x00' in request_path:
            raise PathOutsideRootError(request_path, "Invalid path")

        relative = request_path.lstrip('/')
        absolute = os.path.normpath(os.path.join(self.root, relative)) if relative else self.root

        if not self.contains(absolute):
            raise PathOutsideRootError(request_path)

        return ResolvedPath(
            request_path=request_path,
            absolute=absolute,
            is_root=absolute == self.root,
        )

    def resolve_leaf(self, requested: str) -> ResolvedPath:
        """
        Resolve a path that is about to be created, written or deleted.

        The root itself is rejected, and the final segment is sanitized after
        the containment check.

        Raises:
            PathOutsideRootError: If the path escapes the root, is the root,
                or its final segment is empty after sanitization
        """
        resolved = self.resolve(requested)
        if resolved.is_root:
            raise PathOutsideRootError(resolved.request_path, "Operation not allowed on the shared root")
        return self.sanitize(resolved)

    def sanitize(self, resolved: ResolvedPath) -> ResolvedPath:
        """
        Apply ``sanitize_filename`` to the final segment of a resolved path.

        Raises:
            PathOutsideRootError: If nothing is left of the final segment
        """
        if resolved.is_root:
            return resolved

        leaf = sanitize_filename(os.path.basename(resolved.absolute))
        if not leaf:
            raise PathOutsideRootError(resolved.request_path, "Invalid file name")

        absolute = os.path.join(resolved.parent, leaf)
        if not self.contains(absolute) or absolute == self.root:
            raise PathOutsideRootError(resolved.request_path)

        return ResolvedPath(
            request_path=resolved.request_path,
            absolute=absolute,
            is_root=False,
        )
