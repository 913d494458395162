"""Registration, login and current-user endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from api._helpers import require_fields
from auth import get_current_user
from database import get_db
from models.user import User
from schemas.auth import AuthResponse, LoginRequest, MeResponse, RegisterRequest
from services.security import MAX_PASSWORD_BYTES, create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=201,
    responses={400: {"description": "Missing fields"}, 409: {"description": "Email already in use"}},
)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    require_fields(payload, "name", "email", "password")
    if len(payload.password.encode()) > MAX_PASSWORD_BYTES:
        raise HTTPException(
            status_code=400, detail=f"Password must be at most {MAX_PASSWORD_BYTES} bytes."
        )
    email = payload.email.strip().lower()

    if db.query(User.id).filter(User.email == email).first():
        raise HTTPException(status_code=409, detail="Email already in use.")

    user = User(name=payload.name, email=email, password_hash=hash_password(payload.password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent registration for the same email
        db.rollback()
        raise HTTPException(status_code=409, detail="Email already in use.")
    db.refresh(user)

    logger.info("Registered user %s", user.id)
    return {"user": user, "token": create_access_token(user.id)}


@router.post("/login", response_model=AuthResponse, responses={401: {"description": "Invalid credentials"}})
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    require_fields(payload, "email", "password")
    user = db.query(User).filter(User.email == payload.email.strip().lower()).first()
    if not user or not verify_password(user.password_hash, payload.password):
        raise HTTPException(status_code=401, detail="Invalid credentials.")
    return {"user": user, "token": create_access_token(user.id)}


@router.get("/me", response_model=MeResponse)
def me(user: User = Depends(get_current_user)):
    return {"user": user}
