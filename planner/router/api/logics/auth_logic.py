from datetime import datetime, timedelta
from typing import Any, Dict

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from planner.auth_util import (
    create_access_token,
    generate_reset_token,
    get_password_hash,
    hash_reset_token,
    verify_password,
)
from planner.config import settings
from planner.log import get_logger
from planner.model.users import User
from planner.router.aws_ses import send_password_reset_email
from planner.schema.auth_schema import (
    ForgotPasswordRequest,
    LoginRequest,
    ResetPasswordRequest,
    UserRegister,
)

log = get_logger(__name__)


def _user_payload(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "email": user.email,
    }


def _issue_token(user: User) -> str:
    return create_access_token(
        subject=user.id,
        email=user.email,
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def register_logic(db: Session, request: UserRegister) -> Dict[str, Any]:
    """Register a new user and sign them in right away.

    Args:
        db (Session): Database session
        request (UserRegister): first_name, last_name, email, password and optional timezone

    Raises:
        HTTPException: 409 when the email is already registered

    Returns:
        Dict[str, Any]: message, public user fields and a bearer token
    """
    existing = db.query(User).filter(User.email == request.email).first()
    if existing:
        log.warning("Auth register - %s - FAILED - email already registered", request.email)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="El correo electrónico ya está registrado.",
        )

    user = User(
        first_name=request.first_name,
        last_name=request.last_name,
        email=request.email,
        hashed_password=get_password_hash(request.password),
        timezone=request.timezone or settings.DEFAULT_TIMEZONE,
        created_at=datetime.now(),
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    log.info("Auth register - %s - SUCCESS", user.email)
    return {
        "message": "Usuario registrado exitosamente",
        "user": _user_payload(user),
        "token": _issue_token(user),
    }


def login_logic(db: Session, request: LoginRequest) -> Dict[str, Any]:
    """Check email/password and return a fresh token.

    Raises:
        HTTPException: 401 on unknown email or wrong password
    """
    user = db.query(User).filter(User.email == request.email).first()
    if not user or not verify_password(request.password, user.hashed_password):
        log.warning("Auth login - %s - FAILED - invalid credentials", request.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Credenciales inválidas.",
        )

    user.last_login_time = datetime.now()
    db.commit()

    log.info("Auth login - %s - SUCCESS", user.email)
    return {
        "message": "Inicio de sesión exitoso",
        "user": _user_payload(user),
        "token": _issue_token(user),
    }


def forgot_password_logic(db: Session, request: ForgotPasswordRequest) -> Dict[str, str]:
    """Store a hashed one-time reset token and email the plain one.

    Raises:
        HTTPException: 404 when no user has that email
    """
    user = db.query(User).filter(User.email == request.email).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No se encontró un usuario con ese correo electrónico.",
        )

    token, token_hash = generate_reset_token()
    user.reset_token_hash = token_hash
    user.reset_token_expires_at = datetime.now() + timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES)
    db.commit()

    if not send_password_reset_email(user.email, user.first_name, token):
        user.reset_token_hash = None
        user.reset_token_expires_at = None
        db.commit()
        log.error("Auth forgot-password - %s - FAILED - reset email not sent", user.email)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="No se pudo enviar el correo de restablecimiento.",
        )
    return {"message": "Se ha enviado un correo de restablecimiento de contraseña."}


def _user_by_reset_token(db: Session, token: str) -> User:
    user = db.query(User).filter(
        User.reset_token_hash == hash_reset_token(token),
        User.reset_token_expires_at > datetime.now(),
    ).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="El token de restablecimiento de contraseña es inválido o ha expirado.",
        )
    return user


def reset_password_logic(db: Session, token: str, request: ResetPasswordRequest) -> Dict[str, str]:
    user = _user_by_reset_token(db, token)
    user.hashed_password = get_password_hash(request.password)
    user.reset_token_hash = None
    user.reset_token_expires_at = None
    db.commit()
    log.info("Auth reset-password - %s - SUCCESS", user.email)
    return {"message": "La contraseña ha sido actualizada exitosamente."}


def verify_reset_token_logic(db: Session, token: str) -> Dict[str, str]:
    _user_by_reset_token(db, token)
    return {"message": "Token válido."}
