from datetime import date
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt
from pydantic import ValidationError
from sqlalchemy.orm import Session

from planner.config import settings
from planner.database import get_db
from planner.log import get_logger
from planner.model.users import User
from planner.streak_util import is_valid_timezone, today_in
from planner.schema.auth_schema import TokenPayload

log = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> TokenPayload:
    """
    Decode the bearer token. A missing token is a 403, an unreadable or
    expired one is a 401 so the client drops its session and signs in again.
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authenticated")
    try:
        payload = jwt.decode(credentials.credentials, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        token_data = TokenPayload(**payload)
    except (jwt.JWTError, ValidationError) as e:
        log.warning("Rejected token: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e
    return token_data


def get_current_user(
    db: Session = Depends(get_db), token: TokenPayload = Depends(get_token)
) -> User:
    user = db.query(User).filter(User.id == int(token.sub)).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found"
        )
    return user


def get_client_timezone(
    x_timezone: Optional[str] = Header(default=None),
    user: User = Depends(get_current_user),
) -> str:
    """IANA timezone used to decide what "today" is for this request."""
    if is_valid_timezone(x_timezone):
        return x_timezone
    if is_valid_timezone(user.timezone):
        return user.timezone
    return settings.DEFAULT_TIMEZONE


def get_today(tz_name: str = Depends(get_client_timezone)) -> date:
    return today_in(tz_name)
