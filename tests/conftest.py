"""Shared pytest fixtures for all tests."""

import pytest
from fastapi.testclient import TestClient

from cli.config import Config
from host.access_control import RequestContext
from host.config import build_settings
from host.main import create_app


@pytest.fixture
def share_root(tmp_path):
    """
    Create a shared root with a few sample entries.

    Layout:
        A/                 (directory)
        A/inner.txt        "inner"
        b.txt              "hello"
        empty.txt          ""
        empty-dir/         (directory)

    Returns:
        Path to the shared root
    """
    root = tmp_path / 'share'
    root.mkdir()
    (root / 'A').mkdir()
    (root / 'A' / 'inner.txt').write_text('inner')
    (root / 'b.txt').write_text('hello')
    (root / 'empty.txt').write_bytes(b'')
    (root / 'empty-dir').mkdir()
    return root


@pytest.fixture
def make_settings(share_root):
    """
    Factory for host settings on the sample shared root.
    """
    def factory(**overrides):
        overrides.setdefault('root', str(share_root))
        return build_settings(**overrides)

    return factory


@pytest.fixture
def make_app_client(make_settings):
    """
    Factory for a FastAPI test client around settings built from overrides.
    """
    def factory(**overrides):
        return TestClient(create_app(make_settings(**overrides)))

    return factory


@pytest.fixture
def app_client(make_app_client):
    """Test client for an unrestricted, writable host."""
    return make_app_client()


@pytest.fixture
def context():
    """Request context of an anonymous request."""
    return RequestContext(request_id='test-request', method='GET')


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Returns:
        Path to temporary .share-folder directory
    """
    config_dir = tmp_path / '.share-folder'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary config instance.

    Returns:
        Config instance with temp config file
    """
    return Config(temp_config_dir / 'config.json')


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a sample local file for upload tests.

    Returns:
        Path to sample text file
    """
    file_path = tmp_path / 'local.txt'
    file_path.write_text('Sample content for testing')
    return file_path
