"""Storage layer for short links."""

from .base import LinkStoreBase
from .memory import LinkStoreMemory
from .postgres import LinkStorePostgres
from .cache import RedisCache
from .factory import create_link_store
from .models import LinkRecord

__all__ = [
    "LinkStoreBase",
    "LinkStoreMemory",
    "LinkStorePostgres",
    "RedisCache",
    "create_link_store",
    "LinkRecord",
]
