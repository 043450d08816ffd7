"""HTTP client mirroring the host's share operations."""

import uuid
from typing import List, Optional
from urllib.parse import quote

import httpx

from common import entry_codec
from common.credentials import encode_basic_credentials
from common.constants import ENTRY_MARKER_DIRECTORY, ENTRY_MARKER_FILE, HEADER_TYPE
from common.logging_config import get_logger
from common.paths import normalize_path
from common.types import DirectoryEntry
from cli.config import Config
from cli.errors import (
    AlreadyExistsError,
    ConflictError,
    EntryTypeMismatchError,
    ForbiddenError,
    InvalidPathError,
    NotFoundError,
    PathIsDirectoryError,
    TransportFailureError,
    UnauthorizedError,
    UnexpectedResponseError,
)

logger = get_logger(__name__)

STATUS_ERRORS = {
    400: InvalidPathError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
}

# Verb specific meaning of 409.
CONFLICT_ERRORS = {
    'mkdir': AlreadyExistsError,
    'upload': PathIsDirectoryError,
}


class ShareFolderClient:
    """
    HTTP client for a share-folder host.

    Every method raises a ShareFolderClientError subclass for any outcome
    other than 200/204; nothing is retried.
    """

    def __init__(self, config: Config, session: Optional[httpx.Client] = None):
        """
        Initialize share client.

        Args:
            config: Configuration instance
            session: Optional pre-built httpx client (testing)
        """
        self.config = config

        headers = {}
        credentials = config.get_credentials()
        if credentials is not None:
            headers['Authorization'] = encode_basic_credentials(*credentials)

        if session is None:
            session = httpx.Client(
                base_url=config.get_base_url(),
                timeout=config.get_timeout(),
                verify=config.get_verify_ssl(),
            )
        session.headers.update(headers)
        self.session = session
        self.request_id = None
        logger.debug(f"Initialized ShareFolderClient [base_url={self.session.base_url}]")

    def _url(self, path: str) -> str:
        return quote(normalize_path(path), safe='/')

    def _request(self, verb: str, method: str, path: str, **kwargs) -> httpx.Response:
        """
        Send one request and map its status.

        Args:
            verb: Operation name, used to interpret 409
            method: HTTP method
            path: Remote path

        Returns:
            Response with status 200 or 204

        Raises:
            ShareFolderClientError: For every other outcome
        """
        url = self._url(path)

        self.request_id = str(uuid.uuid4())
        headers = kwargs.pop('headers', {})
        headers['X-Request-ID'] = self.request_id

        logger.debug(f"Making request: {method} {url} [request_id={self.request_id}]")

        try:
            response = self.session.request(method, url, headers=headers, **kwargs)
        except httpx.ConnectError as e:
            logger.error(f"Connection failed: {method} {url} error={e} [request_id={self.request_id}]")
            raise TransportFailureError(f"Cannot connect to host at {self.session.base_url}", path=path) from e
        except httpx.TimeoutException as e:
            logger.error(f"Request timed out: {method} {url} [request_id={self.request_id}]")
            raise TransportFailureError("Request timed out", path=path) from e
        except httpx.TransportError as e:
            logger.error(f"Transport error: {method} {url} error={e} [request_id={self.request_id}]")
            raise TransportFailureError(f"Connection to host failed: {e}", path=path) from e

        logger.debug(
            f"Response received: {method} {url} status={response.status_code} [request_id={self.request_id}]"
        )

        self._raise_for_status(verb, path, response)
        return response

    def _raise_for_status(self, verb: str, path: str, response: httpx.Response) -> None:
        """
        Raise the client error matching a non-success status.
        """
        status_code = response.status_code
        if status_code in (200, 204):
            return

        detail = self._error_detail(response)
        logger.warning(
            f"Request failed: {verb} {normalize_path(path)} status={status_code} [request_id={self.request_id}]"
        )

        if status_code == 409:
            error_class = CONFLICT_ERRORS.get(verb, ConflictError)
            raise error_class(detail or "Conflict", status_code=status_code, path=path)

        error_class = STATUS_ERRORS.get(status_code)
        if error_class is None:
            raise UnexpectedResponseError(status_code, path=path, detail=detail)
        raise error_class(detail or response.reason_phrase, status_code=status_code, path=path)

    def _error_detail(self, response: httpx.Response) -> Optional[str]:
        try:
            data = response.json()
        except ValueError:
            return response.text or None
        if isinstance(data, dict):
            return data.get('detail')
        return None

    def _decode_entry(self, response: httpx.Response, path: str) -> DirectoryEntry:
        try:
            return entry_codec.decode(response.json())
        except ValueError as e:
            raise UnexpectedResponseError(response.status_code, path=path, detail="Invalid entry payload") from e

    def _require_type(self, response: httpx.Response, path: str, marker: str) -> None:
        actual = response.headers.get(HEADER_TYPE)
        if actual != marker:
            expected = "directory" if marker == ENTRY_MARKER_DIRECTORY else "file"
            raise EntryTypeMismatchError(f"Not a {expected}: {normalize_path(path)}", path=path)

    def list(self, path: str = '/') -> List[DirectoryEntry]:
        """
        List a remote directory.

        Returns:
            Entries with directories first, then by case-insensitive name

        Raises:
            EntryTypeMismatchError: If the path is a file
        """
        response = self._request('list', 'GET', path)
        self._require_type(response, path, ENTRY_MARKER_DIRECTORY)

        if response.status_code == 204:
            return []

        try:
            payload = response.json()
            if not isinstance(payload, list):
                raise ValueError("expected a JSON array")
            entries = [entry_codec.decode(item) for item in payload]
        except ValueError as e:
            raise UnexpectedResponseError(response.status_code, path=path, detail="Invalid entry payload") from e

        return entry_codec.sort_entries(entries)

    def info(self, path: str = '/') -> DirectoryEntry:
        """
        Get the metadata of a remote entry.
        """
        response = self._request('info', 'GET', path, params={'info': '1'})
        return self._decode_entry(response, path)

    def make_directory(self, path: str) -> DirectoryEntry:
        """
        Create a remote directory, including missing parents.

        Raises:
            AlreadyExistsError: If an entry exists at the path
        """
        response = self._request('mkdir', 'POST', path)
        return self._decode_entry(response, path)

    def upload(self, path: str, data: bytes) -> DirectoryEntry:
        """
        Write ``data`` as the full content of a remote file.

        Raises:
            PathIsDirectoryError: If a directory exists at the path
        """
        response = self._request(
            'upload',
            'PUT',
            path,
            content=data,
            headers={'Content-Type': 'application/octet-stream'},
        )
        return self._decode_entry(response, path)

    def download(self, path: str) -> bytes:
        """
        Read the full content of a remote file.

        Raises:
            EntryTypeMismatchError: If the path is a directory
        """
        response = self._request('download', 'GET', path)
        self._require_type(response, path, ENTRY_MARKER_FILE)

        if response.status_code == 204:
            return b''
        return response.content

    def remove(self, path: str) -> DirectoryEntry:
        """
        Delete a remote file or directory tree.

        Returns:
            The entry as it was before deletion
        """
        response = self._request('delete', 'DELETE', path)
        return self._decode_entry(response, path)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> 'ShareFolderClient':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
