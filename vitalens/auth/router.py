"""
Auth Router - Signup, login and current user endpoints.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm

from ..records.dependencies import get_record_store
from ..records.exceptions import InvalidCredentialsException
from ..records.schemas import Credentials, StoredUser
from ..records.store import RecordStore
from .dependencies import get_current_user
from .schemas import SignupRequest, LoginRequest, LoginResponse, UserResponse
from .service import signup_doctor, login_doctor

router = APIRouter()

@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED, summary="Doctor Signup")
async def signup_route(
    signup_data: SignupRequest,
    store: RecordStore = Depends(get_record_store)
):
    """
    Create a doctor account.

    Responds with 409 if the doctor ID is already registered in any letter case.
    """
    return signup_doctor(store, signup_data)

@router.post("/login", response_model=LoginResponse, summary="Doctor Login")
async def login_route(
    login_data: LoginRequest,
    store: RecordStore = Depends(get_record_store)
):
    """
    Log in with doctor ID and password and receive a bearer token.
    """
    return login_doctor(store, login_data)

@router.post("/token", include_in_schema=False)
async def oauth2_token_route(
    form_data: OAuth2PasswordRequestForm = Depends(),
    store: RecordStore = Depends(get_record_store)
):
    """
    OAuth2 token endpoint for compatibility with OAuth2 clients.
    """
    try:
        result = login_doctor(store, Credentials(doctor_id=form_data.username, password=form_data.password))
    except InvalidCredentialsException as e:
        raise HTTPException(
            status_code=e.status_code,
            detail=e.detail,
            headers={"WWW-Authenticate": "Bearer"}
        )
    return {"access_token": result["access_token"], "token_type": result["token_type"]}

@router.get("/me", response_model=UserResponse, summary="Get Current User")
async def get_me_route(current_user: StoredUser = Depends(get_current_user)):
    """
    Return the logged-in doctor.
    """
    return current_user
