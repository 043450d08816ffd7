"""Entry point for the share-folder host."""

import ssl
import time
import uuid
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request

from common.constants import POWERED_BY
from common.logging_config import setup_logging, get_logger
from host.access_control import AccessControlChain
from host.config import HostSettings, load_settings
from host.exceptions import (
    AuthenticationRequiredError,
    EntryConflictError,
    EntryNotFoundError,
    PathOutsideRootError,
    ReadOnlyHostError,
    RootUnavailableError,
    ShareFolderError,
)
from host.network import allow_list_protocol
from host.path_resolver import PathResolver
from host.responses import error_response
from host.routes.share_routes import router as share_router
from host.services.share_service import ShareService

logger = get_logger(__name__)


def create_app(settings: HostSettings) -> FastAPI:
    """
    Build the host application around an immutable settings snapshot.

    Args:
        settings: Host configuration captured at startup

    Returns:
        The FastAPI application; the allow-list gate is enforced by the
        transport (see ``serve``)
    """
    app = FastAPI(
        title="share-folder",
        description="Shares one directory over HTTP",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.state.settings = settings
    app.state.access_chain = AccessControlChain(settings)
    app.state.share_service = ShareService(PathResolver(settings.root))

    @app.middleware("http")
    async def access_control(request: Request, call_next):
        """
        Run the request gates and attach the resulting context to the request.
        """
        request_id = getattr(request.state, 'request_id', None) or str(uuid.uuid4())

        try:
            request.state.context = await app.state.access_chain.authorize(request, request_id)
        except ShareFolderError as e:
            logger.warning(
                f"Request rejected: {request.method} {request.url.path} {type(e).__name__} [request_id={request_id}]"
            )
            return error_response(e, request_id)

        return await call_next(request)

    # Registered last so it wraps the gates.
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """
        Middleware to log all HTTP requests and responses.
        """
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.time()

        logger.info(
            f"Request started: {request.method} {request.url.path} [request_id={request_id}]"
        )

        response = await call_next(request)

        duration = time.time() - start_time

        context = getattr(request.state, 'context', None)
        logger.info(
            f"Request completed: {request.method} {request.url.path} "
            f"status={response.status_code} duration={duration:.3f}s "
            f"[request_id={request_id}] [user={context.principal if context else 'anonymous'}]"
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Powered-By"] = POWERED_BY

        return response

    @app.on_event("startup")
    async def startup_event():
        logger.info("Share-folder host starting up...")
        logger.info(
            f"Sharing {settings.root} on {settings.host}:{settings.port} "
            f"secure={settings.is_secure} read_only={settings.read_only} "
            f"allow_list={len(settings.allow_list)} auth={settings.requires_authentication}"
        )

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Share-folder host shutting down...")

    @app.exception_handler(PathOutsideRootError)
    async def path_outside_root_handler(request: Request, exc: PathOutsideRootError):
        request_id = getattr(request.state, 'request_id', None)
        logger.warning(
            f"Invalid path error: {exc} [request_id={request_id}]"
        )
        return error_response(exc, request_id)

    @app.exception_handler(EntryNotFoundError)
    async def entry_not_found_handler(request: Request, exc: EntryNotFoundError):
        request_id = getattr(request.state, 'request_id', None)
        logger.info(
            f"Entry not found: {exc.request_path} [request_id={request_id}]"
        )
        return error_response(exc, request_id)

    @app.exception_handler(EntryConflictError)
    async def entry_conflict_handler(request: Request, exc: EntryConflictError):
        request_id = getattr(request.state, 'request_id', None)
        logger.warning(
            f"Entry conflict: {exc} [request_id={request_id}]"
        )
        return error_response(exc, request_id)

    @app.exception_handler(ShareFolderError)
    async def share_folder_error_handler(request: Request, exc: ShareFolderError):
        request_id = getattr(request.state, 'request_id', None)
        if isinstance(exc, (AuthenticationRequiredError, ReadOnlyHostError, RootUnavailableError)):
            logger.warning(f"Request rejected: {exc} [request_id={request_id}]")
        else:
            logger.error(
                f"Share-folder error: {exc} [request_id={request_id}] path={request.url.path}",
                exc_info=True
            )
        return error_response(exc, request_id)

    @app.exception_handler(OSError)
    async def os_error_handler(request: Request, exc: OSError):
        request_id = getattr(request.state, 'request_id', None)
        logger.error(
            f"Filesystem error: {exc} [request_id={request_id}] path={request.url.path}",
            exc_info=True
        )
        return error_response(exc, request_id)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        request_id = getattr(request.state, 'request_id', None)
        logger.error(
            f"Unexpected error: {type(exc).__name__}: {exc} [request_id={request_id}] path={request.url.path}",
            exc_info=True
        )
        return error_response(exc, request_id)

    app.include_router(share_router)

    return app


def build_server_config(settings: HostSettings, app: Optional[FastAPI] = None) -> uvicorn.Config:
    """
    Translate the settings into a uvicorn configuration, including the TLS
    material and the allow-list protocol.
    """
    options = {}
    if settings.ssl is not None:
        options = {
            "ssl_certfile": settings.ssl.cert,
            "ssl_keyfile": settings.ssl.key,
            "ssl_keyfile_password": settings.ssl.passphrase,
            "ssl_ca_certs": settings.ssl.ca,
            "ssl_cert_reqs": ssl.CERT_REQUIRED if settings.ssl.reject_unauthorized else ssl.CERT_NONE,
        }

    return uvicorn.Config(
        app or create_app(settings),
        host=settings.host,
        port=settings.port,
        http=allow_list_protocol(settings.allow_list),
        **options
    )


def serve(settings: HostSettings) -> None:
    """
    Run the host until interrupted.
    """
    server = uvicorn.Server(build_server_config(settings))
    server.run()


def main() -> None:
    """
    Start the host with settings taken from the environment.
    """
    setup_logging('host')
    serve(load_settings())


if __name__ == "__main__":
    main()
