"""CLI command modules for siteplan."""

from .config import config
from .db import db
from .item import item
from .project import project
from .serve import serve
from .tree import tree
from .user import user

__all__ = [
    "config",
    "db",
    "item",
    "project",
    "serve",
    "tree",
    "user",
]
