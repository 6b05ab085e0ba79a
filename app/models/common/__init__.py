"""Common models."""

from app.models.common.base import BaseEntity
from app.models.common.cache import CachedEntry

__all__ = [
    "BaseEntity",
    "CachedEntry",
]
