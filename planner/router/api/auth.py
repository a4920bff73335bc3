from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from planner.database import get_db
from planner.router.api.logics.auth_logic import (
    forgot_password_logic,
    login_logic,
    register_logic,
    reset_password_logic,
    verify_reset_token_logic,
)
from planner.schema.auth_schema import (
    AuthResponse,
    ForgotPasswordRequest,
    LoginRequest,
    MessageOut,
    ResetPasswordRequest,
    UserRegister,
)

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(request: UserRegister, db: Session = Depends(get_db)):
    """Register a new user and return a bearer token for them.

    Args:
        request (UserRegister): first_name, last_name, email, password, [Optional] timezone
        db (Session): Database session

    Raises:
        HTTPException: 409 when the email is already registered

    Returns:
        AuthResponse: message, user and token
    """
    return register_logic(db, request)


@router.post("/login", response_model=AuthResponse, status_code=status.HTTP_200_OK)
async def login(request: LoginRequest, db: Session = Depends(get_db)):
    """Email/password login. Bad credentials are a 401."""
    return login_logic(db, request)


@router.post("/forgot-password", response_model=MessageOut, status_code=status.HTTP_200_OK)
async def forgot_password(request: ForgotPasswordRequest, db: Session = Depends(get_db)):
    """Email a one-hour password reset link to the user."""
    return forgot_password_logic(db, request)


@router.post("/reset-password/{token}", response_model=MessageOut, status_code=status.HTTP_200_OK)
async def reset_password(token: str, request: ResetPasswordRequest, db: Session = Depends(get_db)):
    return reset_password_logic(db, token, request)


@router.get("/verify-reset-token/{token}", response_model=MessageOut, status_code=status.HTTP_200_OK)
async def verify_reset_token(token: str, db: Session = Depends(get_db)):
    return verify_reset_token_logic(db, token)
