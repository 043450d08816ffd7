"""Request path normalization shared by host and client."""

import os
from typing import Optional


def normalize_path(path: Optional[str]) -> str:
    """
    Bring a client supplied path into canonical request form.

    The canonical form uses forward slashes, always starts with a single
    ``/`` and has no trailing slash, except for the root itself.

    Args:
        path: Raw path (may be None, empty, ``.`` or use platform separators)

    Returns:
        Canonical request path, e.g. ``/docs/readme.txt`` or ``/``
    """
    value = "" if path is None else str(path)

    if value.strip() == ".":
        value = ""

    for separator in (os.sep, os.altsep):
        if separator and separator != "/":
            value = value.replace(separator, "/")

    value = value.strip("/")

    return "/" + value

