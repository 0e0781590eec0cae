"""
Record store for the EMR collections.

This module provides:
- Pydantic record models serialized as camelCase JSON
- A generic JSON-array collection with CRUD operations
- The RecordStore facade with doctor scoping and cascading patient deletion
"""
from .store import RecordStore, DOCTOR_NAMES
from .collection import RecordCollection

__all__ = ["RecordStore", "RecordCollection", "DOCTOR_NAMES"]
