"""Configuration management for the share-folder client."""

import json
import shutil
from pathlib import Path
from typing import Optional, Tuple

from common.constants import DEFAULT_PORT
from common.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / '.share-folder' / 'config.json'


class Config:
    """Manages client configuration stored in JSON file."""

    DEFAULT_CONFIG = {
        "host": "127.0.0.1",
        "port": DEFAULT_PORT,
        "ssl": False,
        "verify_ssl": False,
        "timeout": 30,
        "user": None,
        "password": None,
    }

    def __init__(self, config_path: Path = DEFAULT_CONFIG_PATH):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.share-folder/config.json)
        """
        self.config_path = Path(config_path)
        self.data = self._load()

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        A file that cannot be parsed is copied to ``config.json.bak`` and
        the defaults are used instead.

        Returns:
            Configuration dictionary
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            import tempfile
            self.config_path = Path(tempfile.gettempdir()) / '.share-folder' / 'config.json'
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    raise ValueError("config root must be an object")
                config = self.DEFAULT_CONFIG.copy()
                config.update(data)
                return config
            except (json.JSONDecodeError, ValueError, IOError) as e:
                logger.warning(f"Invalid config file {self.config_path}: {e}; using defaults")
                backup_path = self.config_path.with_suffix('.json.bak')
                try:
                    shutil.copy(self.config_path, backup_path)
                except OSError as copy_error:
                    logger.warning(f"Could not back up config file: {copy_error}")
                return self.DEFAULT_CONFIG.copy()
        else:
            config = self.DEFAULT_CONFIG.copy()
            try:
                with open(self.config_path, 'w') as f:
                    json.dump(config, f, indent=2)
            except IOError as e:
                logger.warning(f"Could not write default config: {e}")
            return config

    def override(self, **values) -> None:
        """
        Replace values for this process only; None values are ignored.
        Nothing is written to disk.
        """
        for key, value in values.items():
            if value is not None:
                self.data[key] = value

    def get_base_url(self) -> str:
        """
        Get host base URL.

        Returns:
            Base URL string (e.g., "http://127.0.0.1:55555")
        """
        host = str(self.data.get('host') or '127.0.0.1')
        port = self.data.get('port') or DEFAULT_PORT
        scheme = 'https' if self.data.get('ssl') else 'http'
        if ':' in host and not host.startswith('['):
            host = f"[{host}]"
        return f"{scheme}://{host}:{port}"

    def get_timeout(self) -> float:
        """
        Get request timeout in seconds.
        """
        return float(self.data.get('timeout', 30))

    def get_verify_ssl(self) -> bool:
        return bool(self.data.get('verify_ssl', False))

    def get_credentials(self) -> Optional[Tuple[str, str]]:
        """
        Get the Basic credential pair.

        Returns:
            Tuple of (user, password), or None when neither is configured
        """
        user = self.data.get('user') or ''
        password = self.data.get('password') or ''
        if not user and not password:
            return None
        return user, password
