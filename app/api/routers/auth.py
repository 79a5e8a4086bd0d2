"""
Authentication API Endpoints.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.dependencies import CurrentUser, get_current_user, rbac_service
from app.application.dto.ledger_dto import LoginRequestDTO, LoginResponseDTO
from app.core.security import create_access_token, verify_password
from app.infrastructure.database import get_db
from app.infrastructure.database.models import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/login", response_model=LoginResponseDTO)
def login(dto: LoginRequestDTO, db: Session = Depends(get_db)):
    """Exchange username and password for a bearer token."""
    if not dto.username or not dto.password:
        raise HTTPException(status_code=400, detail="Username and password are required")

    user = db.execute(select(User).where(User.username == dto.username)).scalar_one_or_none()
    if user is None or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password")

    if not verify_password(dto.password, user.password_hash, bytes.fromhex(user.password_salt)):
        logger.warning("Failed login attempt for %s", dto.username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password")

    token = create_access_token(user.id, user.username, user.role)
    return LoginResponseDTO(message="Login successful", token=token, username=user.username, role=user.role)


@router.get("/verify")
def verify(user: CurrentUser = Depends(get_current_user)):
    return {
        "message": "Token is valid",
        "user": user.model_dump(mode="json"),
        "permissions": [p.value for p in rbac_service.get_user_permissions(user.role)],
        "can_distribute_profit": rbac_service.can_distribute_profit(user.role),
    }
