"""Request gates run before any share operation: credentials, write
permission and root availability.

The network allow-list gate runs earlier, when the connection is accepted
(see host.network).
"""

import inspect
import secrets
import stat
from dataclasses import dataclass
from typing import Iterable, Optional

import aiofiles.os
from fastapi import Request

from common.credentials import parse_basic_credentials
from common.logging_config import get_logger
from common.types import Account
from host.config import AccountValidator, HostSettings
from host.exceptions import (
    AuthenticationRequiredError,
    ReadOnlyHostError,
    RootUnavailableError,
)

logger = get_logger(__name__)

MUTATING_METHODS = frozenset({"DELETE", "PATCH", "POST", "PUT"})


@dataclass(frozen=True)
class RequestContext:
    """
    Per-request state produced by the gates and handed to the handlers.
    """
    request_id: str
    method: str
    account: Optional[Account] = None

    @property
    def principal(self) -> str:
        return self.account.name if self.account else "anonymous"


def accounts_validator(accounts: Iterable[Account]) -> AccountValidator:
    """
    Create a validator that accepts exactly the given accounts.
    """
    known = tuple(accounts)

    def validate(username: str, password: str) -> bool:
        matched = False
        for account in known:
            name_ok = secrets.compare_digest(account.name.encode("utf-8"), username.encode("utf-8"))
            password_ok = secrets.compare_digest(account.password.encode("utf-8"), password.encode("utf-8"))
            matched |= name_ok and password_ok
        return matched

    return validate


class AccessControlChain:
    """
    Ordered request gates. Each gate either raises, ending the request, or
    lets it through to the next one.
    """

    def __init__(self, settings: HostSettings):
        self.settings = settings
        self.validator: Optional[AccountValidator] = settings.account_validator
        if self.validator is None and settings.accounts:
            self.validator = accounts_validator(settings.accounts)

    async def check_credentials(self, request: Request) -> Optional[Account]:
        """
        Validate the Basic credentials of a request.

        Returns:
            The matching account, or None when no validation is configured

        Raises:
            AuthenticationRequiredError: If the credentials are rejected
        """
        if self.validator is None:
            return None

        username, password = parse_basic_credentials(request.headers.get("authorization"))

        result = self.validator(username, password)
        if inspect.isawaitable(result):
            result = await result

        if not result:
            logger.warning(f"Rejected credentials for user '{username}' on {request.method} {request.url.path}")
            raise AuthenticationRequiredError(self.settings.realm)

        return Account(name=username, password=password)

    def check_write_permission(self, method: str) -> None:
        """
        Raises:
            ReadOnlyHostError: If the host is read-only and ``method`` mutates
        """
        if self.settings.read_only and method.upper() in MUTATING_METHODS:
            raise ReadOnlyHostError("Host is read-only")

    async def check_root_available(self) -> None:
        """
        Raises:
            RootUnavailableError: If the shared root is gone or is no directory
        """
        try:
            metadata = await aiofiles.os.stat(self.settings.root)
        except OSError:
            metadata = None

        if metadata is None or not stat.S_ISDIR(metadata.st_mode):
            logger.warning("Shared root is not available")
            raise RootUnavailableError("Shared root is not available")

    async def authorize(self, request: Request, request_id: str) -> RequestContext:
        """
        Run the credential, write-permission and root-availability gates in
        this order.

        Returns:
            Context for the downstream handlers
        """
        account = await self.check_credentials(request)
        self.check_write_permission(request.method)
        await self.check_root_available()

        return RequestContext(request_id=request_id, method=request.method.upper(), account=account)
