"""
Shared FastAPI dependencies: bearer authentication and role checks.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from app.core.security import Permission, RBACService, decode_access_token
from app.domain.value_objects import UserRole

bearer_scheme = HTTPBearer(auto_error=False)
rbac_service = RBACService()


class CurrentUser(BaseModel):
    id: int
    username: str
    role: UserRole


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> CurrentUser:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Access token required")

    payload = decode_access_token(credentials.credentials)
    if not payload:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid or expired token")

    try:
        return CurrentUser(id=int(payload["sub"]), username=payload["username"], role=UserRole(payload["role"]))
    except (KeyError, ValueError):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid or expired token")


def require_permission(permission: Permission):
    def checker(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if not rbac_service.has_permission(user.role, permission):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
        return user
    return checker


require_admin = require_permission(Permission.LEDGER_EDIT)
