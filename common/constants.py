"""Project-wide constants (default port, wire headers, content types)."""

DEFAULT_PORT: int = 55555

DEFAULT_REALM: str = "share-folder"

HEADER_TYPE: str = "x-share-folder-type"
ENTRY_MARKER_DIRECTORY: str = "d"
ENTRY_MARKER_FILE: str = "f"

JSON_CONTENT_TYPE: str = "application/json; charset=utf8"
DEFAULT_FILE_CONTENT_TYPE: str = "application/octet-stream"

POWERED_BY: str = "share-folder (FastAPI)"
