"""
FastAPI dependencies for record store access.
"""
from fastapi import Request
from .store import RecordStore

def get_record_store(request: Request) -> RecordStore:
    """
    Record store dependency - Returns the store created at application startup.

    Args:
        request: Incoming request

    Returns:
        RecordStore: Application-wide record store
    """
    return request.app.state.record_store
