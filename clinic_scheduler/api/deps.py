from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ..core.database import get_db
from ..core.security import (
    security, verify_token, AuthenticationError,
    AuthorizationError, UserRole
)
from ..models.user import User

async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the bearer token to an active user row.

    Tokens are issued by the identity service; only the ``sub`` claim is
    trusted here, the role is always read from the database.
    """
    payload = verify_token(credentials.credentials)
    if not payload or payload.token_type != "access" or not payload.sub:
        raise AuthenticationError("Invalid or expired token")

    user = db.query(User).filter(User.id == payload.sub).first()
    if not user or not user.is_active:
        raise AuthenticationError("Unknown or deactivated user")

    return user

def require_role(role: UserRole):
    """Dependency admitting only users tagged with ``role``."""
    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role != role:
            raise AuthorizationError(f"Access denied. Required role: {role.value}")
        return current_user

    return role_checker

get_admin_user = require_role(UserRole.ADMIN)
get_doctor_user = require_role(UserRole.DOCTOR)
get_patient_user = require_role(UserRole.PATIENT)
