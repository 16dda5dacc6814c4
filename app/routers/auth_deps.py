"""
RBAC and tenant dependencies.
Resolves the bearer token to a live user and enforces role and
password-change gates for FastAPI endpoints.
"""
import logging
from typing import Callable, List, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.exceptions import AccessDeniedError, AuthenticationError
from app.database import get_db
from app.models.user import User, UserRole
from app.services import auth as auth_service

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Extracts and validates the current user from the JWT token.
    The user row is reloaded so deactivation takes effect immediately.
    """
    if credentials is None:
        if not request.headers.get("Authorization"):
            raise AuthenticationError("Token de autorização não fornecido")
        raise AuthenticationError("Formato de token inválido. Use 'Bearer <token>'")

    claims = auth_service.decode_access_token(credentials.credentials)

    user = db.get(User, claims.user_id)
    if user is None:
        logger.warning(f"Authentication failed: user {claims.user_id} not found")
        raise AuthenticationError("Usuário não encontrado")
    if not user.is_active:
        logger.warning(f"Authentication failed: user {user.id} is inactive")
        raise AccessDeniedError("Usuário inativo")
    return user


def require_password_changed(current_user: User = Depends(get_current_user)) -> User:
    """Blocks everything but the set-new-password flow while the flag is set."""
    if current_user.needs_password_change:
        raise AccessDeniedError(
            "É necessário alterar a senha antes de continuar",
            details={"requires_password_change": True},
        )
    return current_user


def require_role(allowed_roles: List[UserRole]) -> Callable:
    """
    Dependency factory that checks if the user has one of the allowed roles.

    Usage:
        @router.delete("/{team_id}")
        def delete_team(user: User = Depends(require_role([UserRole.ADMIN]))):
            ...
    """
    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed_roles:
            raise AccessDeniedError(
                f"Acesso negado. Perfis permitidos: {[r.value for r in allowed_roles]}"
            )
        return current_user
    return role_checker


def require_manager():
    """Shorthand for requiring a manager or admin."""
    return require_role([UserRole.ADMIN, UserRole.MANAGER])


def require_admin():
    """Shorthand for requiring admin only."""
    return require_role([UserRole.ADMIN])
