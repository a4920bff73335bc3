import re
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from planner.streak_util import is_valid_timezone

NAME_PATTERN = re.compile(r"^[a-zA-ZÀ-ÿñÑ\s]+$")
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


def _check_password(value: str) -> str:
    if len(value) < 8:
        raise ValueError("La contraseña debe tener al menos 8 caracteres")
    if not PASSWORD_PATTERN.match(value):
        raise ValueError("La contraseña debe contener al menos una mayúscula, una minúscula y un número")
    return value


class Token(BaseModel):
    """Bearer Access Token"""

    access_token: str
    token_type: str


class TokenPayload(BaseModel):
    """Payload for Bearer Access Token"""
    sub: int  # user id
    email: Optional[EmailStr] = None
    exp: int
    iat: Optional[int] = None


class UserOut(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str


class AuthResponse(BaseModel):
    message: str
    user: UserOut
    token: str


class UserRegister(BaseModel):
    first_name: str = Field(min_length=2, max_length=50)
    last_name: str = Field(min_length=2, max_length=50)
    email: EmailStr = Field(max_length=255)
    password: str
    timezone: Optional[str] = None

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def strip_names(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("first_name", "last_name")
    @classmethod
    def letters_only(cls, v: str) -> str:
        if not NAME_PATTERN.match(v):
            raise ValueError("Solo puede contener letras y espacios")
        return v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        return _check_password(v)

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not is_valid_timezone(v):
            raise ValueError("Zona horaria desconocida")
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class ForgotPasswordRequest(BaseModel):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class ResetPasswordRequest(BaseModel):
    password: str

    @field_validator("password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        return _check_password(v)


class MessageOut(BaseModel):
    message: str
