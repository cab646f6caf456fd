"""ORM model for the key/value table that holds serialized collections."""

from sqlalchemy import Column, DateTime, String, Text, func

from membership.models.base import Base


class StorageEntry(Base):
    """
    One persisted value addressed by key, like a browser local-storage slot.

    The member collection lives in a single row as a JSON array; every write
    replaces the whole value.
    """

    __tablename__ = "storage_entries"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
