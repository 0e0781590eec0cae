"""
Storage Entry Model - One row per storage key.
"""
from sqlalchemy import Column, String, Text, DateTime, func
from ..database import Base

class StorageEntry(Base):
    """
    Storage Entry Model - Holds the serialized value of one storage key

    Fields:
    - key: Storage key (primary key)
    - value: Serialized JSON document
    - updated_at: When the value was last written
    """
    __tablename__ = "storage_entries"

    key = Column(String(128), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        """String representation of the StorageEntry model"""
        return f"<StorageEntry(key='{self.key}', size={len(self.value or '')})>"
