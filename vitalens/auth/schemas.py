"""
Auth Schemas - Pydantic models for signup, login and user responses.
"""
from datetime import datetime
from ..core.schemas import CamelModel
from ..records.schemas import Credentials

class SignupRequest(Credentials):
    """
    Signup Schema - Doctor ID and password chosen by the doctor.

    The display name is assigned by the store, not chosen by the user.
    """
    pass

class LoginRequest(Credentials):
    pass

class UserResponse(CamelModel):
    """
    User Response Schema - A user without the password hash.
    """
    id: str
    name: str
    doctor_id: str
    created_at: datetime

class LoginResponse(CamelModel):
    """
    Login Response Schema - Bearer token plus the logged-in user.
    """
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
