from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import List, Optional

from ..core.database import get_db, get_redis
from ..core.security import (
    security, verify_token, AuthenticationError,
    AuthorizationError, UserRole, TokenPayload, AuthenticatedUser
)
from ..services.queue_service import QueueService
from ..services.token_counter import get_token_counter

async def get_current_user_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenPayload:
    """Extract and verify JWT token from Authorization header."""
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    # Verify token
    token_payload = verify_token(credentials.credentials)
    if not token_payload:
        raise AuthenticationError("Invalid or expired token")

    # Check if token is access token
    if token_payload.token_type != "access":
        raise AuthenticationError("Invalid token type")

    return token_payload

async def get_current_user(
    token_payload: TokenPayload = Depends(get_current_user_token)
) -> AuthenticatedUser:
    """Identity and role as asserted by the identity provider."""
    if not token_payload.sub:
        raise AuthenticationError("Invalid token payload")

    try:
        role = UserRole(token_payload.role)
    except ValueError:
        raise AuthenticationError("Invalid role claim")

    return AuthenticatedUser(
        id=token_payload.sub,
        role=role,
        email=token_payload.email
    )

# Role-based access control dependencies
def require_role(allowed_roles: List[UserRole]):
    """Create a dependency that requires specific user roles."""
    async def role_checker(
        current_user: AuthenticatedUser = Depends(get_current_user)
    ) -> AuthenticatedUser:
        if current_user.role not in allowed_roles:
            raise AuthorizationError(
                f"Access denied. Required roles: {[role.value for role in allowed_roles]}"
            )
        return current_user

    return role_checker

# Specific role dependencies
async def get_admin_user(
    current_user: AuthenticatedUser = Depends(require_role([UserRole.ADMIN]))
) -> AuthenticatedUser:
    """Require admin role."""
    return current_user

async def get_staff_user(
    current_user: AuthenticatedUser = Depends(require_role([UserRole.DOCTOR, UserRole.ADMIN]))
) -> AuthenticatedUser:
    """Require doctor or admin role."""
    return current_user

def get_queue_service(
    db: Session = Depends(get_db),
    redis_client = Depends(get_redis)
) -> QueueService:
    """Queue service wired to the configured token counter store."""
    return QueueService(db, get_token_counter(db, redis_client))
