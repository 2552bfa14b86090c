"""Database module for the DevBytes playlist cache."""

from devbytes.db.models import Base, StoredVideo
from devbytes.db.session import get_engine, get_sessionmaker, init_models
from devbytes.db.store import VideoStore

__all__ = [
    "Base",
    "StoredVideo",
    "VideoStore",
    "get_engine",
    "get_sessionmaker",
    "init_models",
]
