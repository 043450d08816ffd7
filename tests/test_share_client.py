"""Unit tests for ShareFolderClient."""

import httpx
import pytest

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
from cli.share_client import ShareFolderClient
from common.credentials import parse_basic_credentials
from common.types import DirectoryEntryType

TIMESTAMP = "2024-01-01T00:00:00.000Z"


def wire_entry(name, entry_type=2, size=0):
    return {"name": name, "type": entry_type, "size": size, "ctime": TIMESTAMP, "mtime": TIMESTAMP}


def make_client(config, handler):
    session = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://test")
    return ShareFolderClient(config, session=session)


class TestSuccess:

    def test_list_resorts_entries(self, temp_config):
        def handler(request):
            assert request.method == "GET"
            assert request.url.path == "/docs"
            return httpx.Response(200, headers={"x-share-folder-type": "d"}, json=[
                wire_entry("b.txt"),
                wire_entry("zeta", 1),
                wire_entry("A", 1),
                wire_entry("a.txt"),
            ])

        entries = make_client(temp_config, handler).list("docs/")

        assert [e.name for e in entries] == ["A", "zeta", "a.txt", "b.txt"]

    def test_list_empty_directory(self, temp_config):
        def handler(request):
            return httpx.Response(204, headers={"x-share-folder-type": "d"})

        assert make_client(temp_config, handler).list("/") == []

    def test_list_on_file_is_type_mismatch(self, temp_config):
        def handler(request):
            return httpx.Response(200, headers={"x-share-folder-type": "f"}, content=b"data")

        with pytest.raises(EntryTypeMismatchError):
            make_client(temp_config, handler).list("/b.txt")

    def test_info_sends_flag(self, temp_config):
        def handler(request):
            assert request.url.params["info"] == "1"
            return httpx.Response(200, json=wire_entry("b.txt", size=5))

        entry = make_client(temp_config, handler).info("/b.txt")

        assert entry.name == "b.txt"
        assert entry.size == 5

    def test_make_directory(self, temp_config):
        def handler(request):
            assert request.method == "POST"
            return httpx.Response(200, json=wire_entry("new", 1))

        entry = make_client(temp_config, handler).make_directory("/new")
        assert entry.type == DirectoryEntryType.Directory

    def test_upload_sends_raw_body(self, temp_config):
        def handler(request):
            assert request.method == "PUT"
            assert request.content == b"payload"
            return httpx.Response(200, json=wire_entry("f.bin", size=7))

        entry = make_client(temp_config, handler).upload("/f.bin", b"payload")
        assert entry.size == 7

    def test_download(self, temp_config):
        def handler(request):
            return httpx.Response(200, headers={"x-share-folder-type": "f"}, content=b"bytes")

        assert make_client(temp_config, handler).download("/f.bin") == b"bytes"

    def test_download_empty_file(self, temp_config):
        def handler(request):
            return httpx.Response(204, headers={"x-share-folder-type": "f"})

        assert make_client(temp_config, handler).download("/empty") == b""

    def test_download_directory_is_type_mismatch(self, temp_config):
        def handler(request):
            return httpx.Response(200, headers={"x-share-folder-type": "d"}, json=[])

        with pytest.raises(EntryTypeMismatchError):
            make_client(temp_config, handler).download("/A")

    def test_remove_returns_snapshot(self, temp_config):
        def handler(request):
            assert request.method == "DELETE"
            return httpx.Response(200, json=wire_entry("old.txt", size=9))

        assert make_client(temp_config, handler).remove("/old.txt").size == 9

    def test_path_is_quoted(self, temp_config):
        seen = []

        def handler(request):
            seen.append(request.url.raw_path)
            return httpx.Response(200, json=wire_entry("a b?.txt"))

        make_client(temp_config, handler).info("/dir/a b?.txt")

        assert seen[0].startswith(b"/dir/a%20b%3F.txt")


class TestStatusMapping:

    @pytest.mark.parametrize("status, error", [
        (400, InvalidPathError),
        (401, UnauthorizedError),
        (403, ForbiddenError),
        (404, NotFoundError),
        (409, ConflictError),
    ])
    def test_known_statuses(self, temp_config, status, error):
        def handler(request):
            return httpx.Response(status, json={"detail": "nope", "code": "X"})

        with pytest.raises(error) as exc_info:
            make_client(temp_config, handler).info("/x")
        assert exc_info.value.status_code == status
        assert "nope" in str(exc_info.value)

    def test_conflict_on_mkdir_is_already_exists(self, temp_config):
        client = make_client(temp_config, lambda request: httpx.Response(409, json={"detail": "exists"}))
        with pytest.raises(AlreadyExistsError):
            client.make_directory("/A")

    def test_conflict_on_upload_is_directory(self, temp_config):
        client = make_client(temp_config, lambda request: httpx.Response(409, json={"detail": "dir"}))
        with pytest.raises(PathIsDirectoryError):
            client.upload("/A", b"x")

    @pytest.mark.parametrize("status", [302, 418, 500, 503])
    def test_other_statuses_are_unexpected(self, temp_config, status):
        client = make_client(temp_config, lambda request: httpx.Response(status, text="boom"))
        with pytest.raises(UnexpectedResponseError) as exc_info:
            client.remove("/x")
        assert exc_info.value.status_code == status

    def test_invalid_entry_payload(self, temp_config):
        client = make_client(temp_config, lambda request: httpx.Response(200, json={"size": -3}))
        with pytest.raises(UnexpectedResponseError):
            client.info("/x")

    def test_no_retry(self, temp_config):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503)

        with pytest.raises(UnexpectedResponseError):
            make_client(temp_config, handler).info("/")
        assert len(calls) == 1


class TestTransport:

    def test_connect_error(self, temp_config):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(TransportFailureError, match="Cannot connect"):
            make_client(temp_config, handler).list("/")

    def test_timeout(self, temp_config):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(TransportFailureError, match="timed out"):
            make_client(temp_config, handler).list("/")

    def test_connection_closed_by_host(self, temp_config):
        def handler(request):
            raise httpx.RemoteProtocolError("Server disconnected without sending a response.", request=request)

        with pytest.raises(TransportFailureError):
            make_client(temp_config, handler).list("/")


class TestHeaders:

    def test_credentials_are_attached(self, temp_config):
        temp_config.override(user="alice", password="p:w")
        seen = []

        def handler(request):
            seen.append(parse_basic_credentials(request.headers.get("authorization")))
            return httpx.Response(200, json=wire_entry("x"))

        make_client(temp_config, handler).info("/x")

        assert seen == [("alice", "p:w")]

    def test_no_credentials_no_header(self, temp_config):
        def handler(request):
            assert "authorization" not in request.headers
            return httpx.Response(200, json=wire_entry("x"))

        make_client(temp_config, handler).info("/x")

    def test_request_id_header(self, temp_config):
        def handler(request):
            return httpx.Response(200, json=wire_entry(request.headers["x-request-id"]))

        client = make_client(temp_config, handler)
        entry = client.info("/x")
        assert entry.name == client.request_id


class TestConfigDerivedSession:

    def test_base_url_and_verify(self, temp_config):
        temp_config.override(host="10.0.0.5", port=8080, ssl=True)
        client = ShareFolderClient(temp_config)
        try:
            assert str(client.session.base_url).startswith("https://10.0.0.5:8080")
        finally:
            client.close()
