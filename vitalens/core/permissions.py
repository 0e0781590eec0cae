"""
Ownership checks for doctor-scoped records.
"""
from typing import Optional, TypeVar

from ..records.exceptions import RecordNotFoundException
from ..records.schemas import StoredUser

RecordT = TypeVar("RecordT")

def require_owner(record: Optional[RecordT], current_user: StoredUser, detail: str = "Record not found") -> RecordT:
    """
    Return the record if it exists and belongs to the current doctor.

    Records owned by another doctor are reported exactly like missing ones.

    Raises:
        RecordNotFoundException: If the record is missing or not owned by the user
    """
    if record is None or getattr(record, "doctor_id", None) != current_user.id:
        raise RecordNotFoundException(detail)
    return record
