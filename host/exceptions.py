"""Custom exception classes for the share-folder host."""


class ShareFolderError(Exception):
    """
    Base exception class for all host errors.
    """
    pass


class ConfigurationError(ShareFolderError):
    """
    Raised at startup when the host settings are invalid.
    """
    pass


class PathOutsideRootError(ShareFolderError):
    """
    Raised when a request path cannot be mapped to a location inside the
    shared root, or names the root where the operation forbids it.
    """

    def __init__(self, request_path: str, reason: str = "Path is outside the shared root"):
        super().__init__(f"{reason}: {request_path}")
        self.request_path = request_path


class AuthenticationRequiredError(ShareFolderError):
    """
    Raised when the credential gate rejects a request.
    """

    def __init__(self, realm: str):
        super().__init__("Authentication required")
        self.realm = realm


class ReadOnlyHostError(ShareFolderError):
    """
    Raised when a mutating request reaches a read-only host.
    """
    pass


class RootUnavailableError(ShareFolderError):
    """
    Raised when the shared root is missing or is not a directory.
    """
    pass


class EntryNotFoundError(ShareFolderError):
    """
    Raised when the requested entry does not exist.
    """

    def __init__(self, request_path: str):
        super().__init__(f"Entry not found: {request_path}")
        self.request_path = request_path


class EntryConflictError(ShareFolderError):
    """
    Raised when an existing entry blocks a create or write.
    """

    def __init__(self, request_path: str, reason: str = "Path is blocked by an existing entry"):
        super().__init__(f"{reason}: {request_path}")
        self.request_path = request_path


class EntryExistsError(EntryConflictError):
    """
    Raised when a directory should be created where an entry already exists.
    """

    def __init__(self, request_path: str):
        super().__init__(request_path, "Entry already exists")


class IsADirectoryConflictError(EntryConflictError):
    """
    Raised when a file should be written where a directory exists.
    """

    def __init__(self, request_path: str):
        super().__init__(request_path, "Path is a directory")
