"""Web interface for armadmin."""

from .app import create_app

__all__ = ["create_app"]
