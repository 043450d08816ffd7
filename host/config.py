"""Configuration settings for the share-folder host."""

import os
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, Tuple, Union

from common.constants import DEFAULT_PORT, DEFAULT_REALM
from common.types import Account
from host.network import AllowList


SHARE_FOLDER_ROOT = os.environ.get("SHARE_FOLDER_ROOT", "")

SHARE_FOLDER_HOST = os.environ.get("SHARE_FOLDER_HOST", "0.0.0.0")

SHARE_FOLDER_PORT = os.environ.get("SHARE_FOLDER_PORT", str(DEFAULT_PORT))

SHARE_FOLDER_REALM = os.environ.get("SHARE_FOLDER_REALM", DEFAULT_REALM)

SHARE_FOLDER_READ_ONLY = os.environ.get("SHARE_FOLDER_READ_ONLY", "false")

SHARE_FOLDER_ALLOWED_IPS = os.environ.get("SHARE_FOLDER_ALLOWED_IPS", "")

SHARE_FOLDER_USER = os.environ.get("SHARE_FOLDER_USER", "")

SHARE_FOLDER_PASSWORD = os.environ.get("SHARE_FOLDER_PASSWORD", "")

SHARE_FOLDER_SSL_CA = os.environ.get("SHARE_FOLDER_SSL_CA", "")

SHARE_FOLDER_SSL_CERT = os.environ.get("SHARE_FOLDER_SSL_CERT", "")

SHARE_FOLDER_SSL_KEY = os.environ.get("SHARE_FOLDER_SSL_KEY", "")

SHARE_FOLDER_SSL_PASSPHRASE = os.environ.get("SHARE_FOLDER_SSL_PASSPHRASE", "")

SHARE_FOLDER_SSL_REJECT_UNAUTHORIZED = os.environ.get("SHARE_FOLDER_SSL_REJECT_UNAUTHORIZED", "false")


AccountValidator = Callable[[str, str], Union[bool, Awaitable[bool]]]


def parse_bool(value: Optional[str]) -> bool:
    """Interpret an environment flag such as '1', 'true', 'yes' or 'on'."""
    return str(value or "").strip().lower() in ("1", "true", "yes", "on")


def parse_port(value, default: int = DEFAULT_PORT) -> int:
    """
    Parse a TCP port, falling back to ``default`` for empty or invalid values.
    """
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def resolve_root(root: Optional[str]) -> str:
    """
    Make the shared root absolute. Empty values mean the working directory.

    The result is normalized lexically; symlinks are not resolved.
    """
    root = (root or "").strip()
    if not root:
        root = os.getcwd()
    return os.path.abspath(root)


def normalize_realm(realm: Optional[str]) -> str:
    realm = (realm or "").strip()
    return realm or DEFAULT_REALM


def _optional_file(path: Optional[str]) -> Optional[str]:
    path = (path or "").strip()
    if not path:
        return None
    return os.path.abspath(path)


@dataclass(frozen=True)
class SSLSettings:
    """
    TLS material for secure mode, loaded by the transport.
    """
    ca: Optional[str] = None
    cert: Optional[str] = None
    key: Optional[str] = None
    passphrase: Optional[str] = None
    reject_unauthorized: bool = False

    @classmethod
    def build(
        cls,
        ca: Optional[str] = None,
        cert: Optional[str] = None,
        key: Optional[str] = None,
        passphrase: Optional[str] = None,
        reject_unauthorized: bool = False,
    ) -> Optional['SSLSettings']:
        """
        Build TLS settings, or return None when no CA, certificate or key
        is given (plain HTTP).
        """
        ca, cert, key = _optional_file(ca), _optional_file(cert), _optional_file(key)
        if ca is None and cert is None and key is None:
            return None
        return cls(
            ca=ca,
            cert=cert,
            key=key,
            passphrase=passphrase or None,
            reject_unauthorized=bool(reject_unauthorized),
        )


@dataclass(frozen=True)
class HostSettings:
    """
    Immutable snapshot of the host configuration, captured at startup.
    """
    root: str
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    realm: str = DEFAULT_REALM
    read_only: bool = False
    allow_list: AllowList = field(default_factory=AllowList)
    accounts: Tuple[Account, ...] = ()
    account_validator: Optional[AccountValidator] = None
    ssl: Optional[SSLSettings] = None

    @property
    def requires_authentication(self) -> bool:
        return bool(self.accounts) or self.account_validator is not None

    @property
    def is_secure(self) -> bool:
        return self.ssl is not None


def build_settings(
    root: Optional[str] = None,
    host: str = "0.0.0.0",
    port=None,
    realm: Optional[str] = None,
    read_only: bool = False,
    allowed_ips=(),
    user: Optional[str] = None,
    password: Optional[str] = None,
    account_validator: Optional[AccountValidator] = None,
    ssl: Optional[SSLSettings] = None,
) -> HostSettings:
    """
    Create a HostSettings snapshot from loosely typed values.

    A single account is configured when a user or a password is given.

    Raises:
        ConfigurationError: If an allow-list entry is invalid
    """
    accounts: Tuple[Account, ...] = ()
    if user or password:
        accounts = (Account(name=user or "", password=password or ""),)

    return HostSettings(
        root=resolve_root(root),
        host=host,
        port=parse_port(port),
        realm=normalize_realm(realm),
        read_only=bool(read_only),
        allow_list=AllowList.parse(allowed_ips),
        accounts=accounts,
        account_validator=account_validator,
        ssl=ssl,
    )


def load_settings() -> HostSettings:
    """
    Build the settings snapshot from SHARE_FOLDER_* environment variables.
    """
    return build_settings(
        root=SHARE_FOLDER_ROOT,
        host=SHARE_FOLDER_HOST,
        port=SHARE_FOLDER_PORT,
        realm=SHARE_FOLDER_REALM,
        read_only=parse_bool(SHARE_FOLDER_READ_ONLY),
        allowed_ips=SHARE_FOLDER_ALLOWED_IPS.split(","),
        user=SHARE_FOLDER_USER,
        password=SHARE_FOLDER_PASSWORD,
        ssl=SSLSettings.build(
            ca=SHARE_FOLDER_SSL_CA,
            cert=SHARE_FOLDER_SSL_CERT,
            key=SHARE_FOLDER_SSL_KEY,
            passphrase=SHARE_FOLDER_SSL_PASSPHRASE,
            reject_unauthorized=parse_bool(SHARE_FOLDER_SSL_REJECT_UNAUTHORIZED),
        ),
    )
