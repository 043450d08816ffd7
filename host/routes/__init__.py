"""API routes package."""

from host.routes.share_routes import router as share_router

__all__ = ["share_router"]
