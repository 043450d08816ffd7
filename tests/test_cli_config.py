"""Tests for CLI configuration module."""

import json

from cli.config import Config


def test_config_creates_default_file(tmp_path):
    """Test that config file is created with defaults if missing."""
    config_path = tmp_path / '.share-folder' / 'config.json'
    config = Config(config_path)

    assert config_path.exists()

    assert config.data['host'] == '127.0.0.1'
    assert config.data['port'] == 55555
    assert config.data['ssl'] is False
    assert config.data['verify_ssl'] is False
    assert config.data['timeout'] == 30
    assert config.get_credentials() is None


def test_config_loads_existing_file(tmp_path):
    """Test loading existing config file."""
    config_path = tmp_path / '.share-folder' / 'config.json'
    config_path.parent.mkdir(parents=True)

    with open(config_path, 'w') as f:
        json.dump({'host': 'files.local', 'port': 9000, 'user': 'alice', 'password': 'pw'}, f)

    config = Config(config_path)

    assert config.data['host'] == 'files.local'
    assert config.data['port'] == 9000
    assert config.get_credentials() == ('alice', 'pw')
    assert config.data['timeout'] == 30


def test_config_handles_corrupted_file(tmp_path):
    """Test recovery from corrupted config file."""
    config_path = tmp_path / '.share-folder' / 'config.json'
    config_path.parent.mkdir(parents=True)

    with open(config_path, 'w') as f:
        f.write('{ invalid json content')

    config = Config(config_path)
    assert config.data['host'] == '127.0.0.1'

    backup_path = config_path.with_suffix('.json.bak')
    assert backup_path.exists()
    assert backup_path.read_text() == '{ invalid json content'


def test_config_non_object_is_treated_as_corrupted(tmp_path):
    config_path = tmp_path / 'config.json'
    config_path.write_text('[1, 2, 3]')

    config = Config(config_path)

    assert config.data['port'] == 55555
    assert config_path.with_suffix('.json.bak').exists()


def test_config_get_base_url(temp_config):
    """Test base URL construction."""
    assert temp_config.get_base_url() == 'http://127.0.0.1:55555'


def test_config_base_url_with_ssl_and_ipv6(temp_config):
    temp_config.override(host='::1', ssl=True, port=8443)
    assert temp_config.get_base_url() == 'https://[::1]:8443'


def test_override_ignores_none_and_does_not_persist(temp_config):
    temp_config.override(host='10.0.0.2', port=None)

    assert temp_config.data['host'] == '10.0.0.2'
    assert temp_config.data['port'] == 55555

    with open(temp_config.config_path, 'r') as f:
        assert json.load(f)['host'] == '127.0.0.1'


def test_credentials_with_only_password(temp_config):
    temp_config.override(password='secret')
    assert temp_config.get_credentials() == ('', 'secret')
