"""CLI commands for armadmin."""

from .init import init
from .serve import serve
from .users import users

__all__ = [
    "init",
    "serve",
    "users",
]
