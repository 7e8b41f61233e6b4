import logging
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session
from labstudy.db import get_db
from labstudy.models import User
from labstudy.schemas.user import UserSignup, UserLogin, UserRead
from labstudy.security import (
    clear_auth_cookie,
    hash_password,
    set_auth_cookie,
    token_for_user,
    verify_password,
)
from labstudy.deps.auth import get_current_user
from labstudy.repositories.user_repo import UserRepository

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

@router.post("/signup")
def signup(payload: UserSignup, response: Response, db: Session = Depends(get_db)):
    if not payload.name or not payload.email or not payload.password:
        raise HTTPException(status_code=400, detail="All fields are required")

    repo = UserRepository(db)
    existing = repo.find_conflict(email=payload.email, name=payload.name)
    if existing:
        if existing.email.lower() == payload.email.lower():
            raise HTTPException(status_code=409, detail="Email already registered")
        raise HTTPException(status_code=409, detail="Username already taken")
    try:
        user = repo.create(
            email=payload.email,
            name=payload.name,
            password_hash=hash_password(payload.password),
            role="admin",
        )
    except ValueError as e:
        if str(e) == "user_already_exists":
            raise HTTPException(status_code=409, detail="Email already registered")
        raise

    log.info("user %s signed up", user.id)
    set_auth_cookie(response, token_for_user(user))
    return {"ok": True}

@router.post("/login")
def login(payload: UserLogin, response: Response, db: Session = Depends(get_db)):
    invalid = HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
    if not payload.email or not payload.password:
        raise invalid
    user = UserRepository(db).get_by_email(payload.email)
    if not user or not verify_password(payload.password, user.password_hash):
        raise invalid
    token = token_for_user(user)
    set_auth_cookie(response, token)
    return {"ok": True, "access_token": token, "token_type": "bearer"}

@router.post("/logout")
def logout(response: Response):
    clear_auth_cookie(response)
    return {"ok": True}

@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    return {"user": UserRead.model_validate(current_user)}
