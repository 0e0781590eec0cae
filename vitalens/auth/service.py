"""
Auth Service - Business logic for doctor signup and login.
"""
from typing import Dict, Any
import logging

from ..core.security import create_access_token
from ..records.exceptions import InvalidCredentialsException
from ..records.schemas import Credentials, StoredUser
from ..records.store import RecordStore

# Set up logging
logger = logging.getLogger(__name__)

def signup_doctor(store: RecordStore, credentials: Credentials) -> StoredUser:
    """
    Register a new doctor account.

    Args:
        store: Record store
        credentials: Doctor ID and password

    Returns:
        StoredUser: Newly created user

    Raises:
        DuplicateAccountException: If the doctor ID is already registered
    """
    return store.add_user(credentials)

def login_doctor(store: RecordStore, credentials: Credentials) -> Dict[str, Any]:
    """
    Authenticate a doctor and issue an access token.

    Args:
        store: Record store
        credentials: Doctor ID and password

    Returns:
        Dict with access_token, token_type and user

    Raises:
        InvalidCredentialsException: If no user matches the credentials
    """
    user = store.find_user(credentials)
    if not user:
        logger.warning(f"Login failed: Invalid credentials for {credentials.doctor_id}")
        raise InvalidCredentialsException()

    logger.info(f"Doctor {user.doctor_id} logged in")
    return {
        "access_token": create_access_token({"sub": user.id}),
        "token_type": "bearer",
        "user": user,
    }
