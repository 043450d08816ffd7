"""Error types raised by the share client."""

from typing import Optional


class ShareFolderClientError(Exception):
    """
    Base exception class for all client errors.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, path: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.path = path


class InvalidPathError(ShareFolderClientError):
    """
    Raised when the host rejects a path as outside the share or invalid (400).
    """
    pass


class UnauthorizedError(ShareFolderClientError):
    """
    Raised when the host rejects the credentials (401).
    """
    pass


class ForbiddenError(ShareFolderClientError):
    """
    Raised when the host refuses the operation, e.g. a write on a
    read-only host (403).
    """
    pass


class NotFoundError(ShareFolderClientError):
    """
    Raised when the remote entry does not exist (404).
    """
    pass


class ConflictError(ShareFolderClientError):
    """
    Raised when an existing remote entry blocks the operation (409).
    """
    pass


class AlreadyExistsError(ConflictError):
    """
    Raised when a directory should be created where an entry exists.
    """
    pass


class PathIsDirectoryError(ConflictError):
    """
    Raised when a file should be written where a directory exists.
    """
    pass


class UnexpectedResponseError(ShareFolderClientError):
    """
    Raised for any status the client has no specific mapping for.
    """

    def __init__(self, status_code: int, path: Optional[str] = None, detail: Optional[str] = None):
        message = f"Unexpected response status {status_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, status_code=status_code, path=path)


class EntryTypeMismatchError(ShareFolderClientError):
    """
    Raised when the remote entry is a directory where a file was expected,
    or the other way round.
    """
    pass


class TransportFailureError(ShareFolderClientError):
    """
    Raised when the request never produced an HTTP response: connection
    refused or closed, timeout, protocol error.
    """
    pass
