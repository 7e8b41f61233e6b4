# labstudy/deps/auth.py
from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from jose.exceptions import ExpiredSignatureError, JWTError

from labstudy.db import get_db
from labstudy.models import User
from labstudy.repositories.user_repo import UserRepository
from labstudy.security import decode_token
from labstudy.services.session_lifecycle import SYSTEM_ACTOR
from labstudy.settings import get_settings

# Bearer is optional; the browser client sends the token as a cookie instead
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

def read_token(request: Request, bearer: Optional[str] = Depends(oauth2_scheme)) -> Optional[str]:
    return bearer or request.cookies.get(get_settings().AUTH_COOKIE_NAME)

def get_current_user(
    db: Session = Depends(get_db),
    token: Optional[str] = Depends(read_token),
) -> User:
    unauth = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if not token:
        raise unauth
    try:
        payload = decode_token(token)
        sub = payload.get("sub")
        if sub is None:
            raise unauth
        user = UserRepository(db).get(str(sub))
    except ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except JWTError:
        raise unauth

    if not user:
        raise unauth
    return user

def get_actor(current_user: User = Depends(get_current_user)) -> str:
    """Name recorded in session history for the caller."""
    return current_user.name or current_user.email or SYSTEM_ACTOR

def require_role(*allowed_roles: str):
    """
    Usage: dependencies=[Depends(require_role("admin"))]
    """
    def dependency(current_user: User = Depends(get_current_user)) -> User:
        role = getattr(current_user.role, "value", current_user.role)
        if role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient role",
            )
        return current_user
    return dependency
