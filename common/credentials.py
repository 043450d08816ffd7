"""Basic credential encoding shared by host and client."""

import base64
import binascii
from typing import Optional, Tuple


def parse_basic_credentials(authorization: Optional[str]) -> Tuple[str, str]:
    """
    Extract a username/password pair from a Basic ``Authorization`` header.

    A missing or malformed header yields an empty pair.

    Args:
        authorization: Raw header value (format: "Basic <base64(user:password)>")

    Returns:
        Tuple of (username, password)
    """
    value = (authorization or "").strip()
    if not value.lower().startswith("basic "):
        return "", ""

    try:
        decoded = base64.b64decode(value[6:].strip()).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return "", ""

    username, _, password = decoded.partition(":")
    return username, password


def encode_basic_credentials(username: str, password: str) -> str:
    """Build the ``Authorization`` header value for a Basic credential pair."""
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"
