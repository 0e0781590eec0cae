"""
Record store exceptions.
"""
from fastapi import status
from ..exceptions import AppException

class RecordStoreException(AppException):
    """Base class for record store exceptions."""
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)

class DuplicateAccountException(RecordStoreException):
    """Exception raised when a doctor ID is already registered."""
    def __init__(self, detail: str = "An account with this Doctor ID already exists."):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)

class InvalidCredentialsException(RecordStoreException):
    """Exception raised when credentials are invalid."""
    def __init__(self, detail: str = "Invalid Doctor ID or password."):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)

class RecordNotFoundException(RecordStoreException):
    """Exception raised when a record does not exist or belongs to another doctor."""
    def __init__(self, detail: str = "Record not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

class RecordReferenceException(RecordStoreException):
    """Exception raised when a new record references a missing user or patient."""
    def __init__(self, detail: str = "Referenced record does not exist"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
