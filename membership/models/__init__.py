"""SQLAlchemy ORM models."""

from membership.models.base import Base
from membership.models.storage_entry import StorageEntry

__all__ = ["Base", "StorageEntry"]
