"""API routers for VenusCMS."""

from venuscms.routers import export, import_router, notifications

__all__ = ["export", "import_router", "notifications"]
