"""
User Service Layer

Login, first-admin bootstrap, password flows and user management.
Authorization decisions come from app.core.permissions; this module only
enforces them and persists the result.
"""
from datetime import datetime, timezone
from typing import List, Optional, Tuple
from uuid import UUID

from app.core.config import settings
from app.core.exceptions import (
    AccessDeniedError,
    AuthenticationError,
    ConflictError,
    InvalidRequestError,
    MalformedHashError,
)
from app.core.permissions import (
    UserAction,
    check_user_management,
    list_scope,
    resolve_new_user_company,
)
from app.core.security import generate_temporary_password, validate_password_strength
from app.models.user import User, UserRole
from app.schemas.auth import CreateUserRequest, DeletedUser, InitAdminRequest, UserUpdate
from app.services import auth as auth_service
from app.services.base import BaseService

USER_NOT_FOUND = "Usuário não encontrado"


class UserService(BaseService):

    # --- Authentication -----------------------------------------------------

    def authenticate(self, email: str, password: str) -> Tuple[str, User]:
        """
        Verify credentials and issue a token.

        The password is checked before the active flag so an inactive
        account is only revealed to someone who knows its password.
        """
        user = self.db.query(User).filter(User.email == email).first()
        if user is None:
            self._logger.warning("Failed login: unknown email", extra={"email": email})
            raise AuthenticationError()

        try:
            valid = auth_service.verify_password(password, user.password)
        except MalformedHashError:
            self._logger.error(f"Stored password hash for user {user.id} is malformed")
            valid = False

        if not valid:
            self._logger.warning("Failed login: wrong password", extra={"email": email})
            raise AuthenticationError()

        if not user.is_active:
            self._logger.warning("Failed login: inactive account", extra={"email": email})
            raise AccessDeniedError("Usuário inativo")

        self._logger.info(f"User {user.id} logged in")
        return auth_service.create_access_token(user), user

    def refresh_token(self, user: User) -> str:
        if not user.is_active:
            raise AccessDeniedError("Usuário inativo")
        return auth_service.create_access_token(user)

    def set_new_password(self, user: User, new_password: str) -> Tuple[str, User]:
        """Complete the forced password change and issue a fresh token."""
        validate_password_strength(new_password)
        if not user.needs_password_change:
            raise InvalidRequestError("Usuário não precisa trocar a senha")

        user.password = auth_service.get_password_hash(new_password)
        user.needs_password_change = False
        user.updated_at = datetime.now(timezone.utc)
        self._commit("atualizar senha")
        self.db.refresh(user)
        self._logger.info(f"User {user.id} set a new password")
        return auth_service.create_access_token(user), user

    def change_password(self, user: User, current_password: str, new_password: str) -> None:
        validate_password_strength(new_password)
        try:
            valid = auth_service.verify_password(current_password, user.password)
        except MalformedHashError:
            self._logger.error(f"Stored password hash for user {user.id} is malformed")
            valid = False
        if not valid:
            raise AuthenticationError("Senha atual incorreta")

        user.password = auth_service.get_password_hash(new_password)
        user.updated_at = datetime.now(timezone.utc)
        self._commit("atualizar senha")
        self._logger.info(f"User {user.id} changed their password")

    # --- Initialization -----------------------------------------------------

    def count_users(self) -> int:
        return self.db.query(User).count()

    def bootstrap_admin(self, data: InitAdminRequest) -> User:
        """Create the very first admin. Only allowed while the users table is empty."""
        if self.count_users() > 0:
            raise AccessDeniedError("Sistema já possui usuários cadastrados")
        if data.install_key != settings.install_key:
            self._logger.warning("Admin bootstrap attempted with an invalid install key")
            raise AuthenticationError("Chave de instalação inválida")

        user = User(
            email=data.email,
            password=auth_service.get_password_hash(data.password),
            name=data.name,
            role=UserRole.ADMIN,
            is_active=True,
        )
        self.db.add(user)
        self._commit("criar usuário administrador")
        self.db.refresh(user)
        self._logger.info(f"Bootstrap admin {user.id} created")
        return user

    # --- Management ---------------------------------------------------------

    def _ensure_email_free(self, email: str, exclude_id: Optional[UUID] = None) -> None:
        query = self.db.query(User).filter(User.email == email)
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        if query.first() is not None:
            raise ConflictError("Email já está em uso")

    def _ensure_company_usable(self, company_id: UUID) -> None:
        company = self._resolve_company(company_id)
        if not company.is_active:
            raise InvalidRequestError("Empresa está inativa")

    def create_user(self, data: CreateUserRequest) -> Tuple[User, Optional[str]]:
        """
        Create a user that must change their password on first login.

        Returns the user and, when one was generated here, the temporary
        password so it can be handed over once.
        """
        check_user_management(self.actor, UserAction.CREATE, data.role, self.actor.company_id, new_role=data.role)
        company_id = resolve_new_user_company(self.actor, data.company_id)
        self._ensure_company_usable(company_id)
        self._ensure_email_free(data.email)

        generated = None
        temporary_password = data.temporary_password
        if temporary_password:
            validate_password_strength(temporary_password)
        else:
            temporary_password = generated = generate_temporary_password()

        user = User(
            email=data.email,
            password=auth_service.get_password_hash(temporary_password),
            name=data.name,
            role=data.role,
            company_id=company_id,
            needs_password_change=True,
            is_active=True,
        )
        self.db.add(user)
        self._commit("criar usuário")
        self.db.refresh(user)
        self._logger.info(f"User {user.id} ({user.role.value}) created by {self.actor.user_id}")
        return user, generated

    def list_users(self) -> List[User]:
        company_id = list_scope(self.actor)
        query = self.db.query(User)
        if company_id is not None:
            query = query.filter(User.company_id == company_id)
        return query.order_by(User.created_at.desc()).all()

    def get_user(self, user_id: UUID) -> User:
        user = self._get_or_404(User, user_id, USER_NOT_FOUND)
        check_user_management(self.actor, UserAction.READ, user.role, user.company_id)
        return user

    def update_user(self, user_id: UUID, patch: UserUpdate) -> User:
        changes = patch.changes()
        user = self._get_or_404(User, user_id, USER_NOT_FOUND)

        check_user_management(
            self.actor,
            UserAction.UPDATE,
            user.role,
            user.company_id,
            target_user_id=user.id,
            new_role=changes.get("role"),
            changes_company="company_id" in changes and changes["company_id"] != user.company_id,
            changes_active="is_active" in changes and changes["is_active"] != user.is_active,
        )

        if "email" in changes:
            self._ensure_email_free(changes["email"], exclude_id=user.id)
        if changes.get("company_id") is not None:
            self._ensure_company_usable(changes["company_id"])

        self._apply_patch(user, changes)
        self._commit("atualizar usuário")
        self.db.refresh(user)
        self._logger.info(f"User {user.id} updated by {self.actor.user_id}: {sorted(changes)}")
        return user

    def delete_user(self, user_id: UUID) -> DeletedUser:
        user = self._get_or_404(User, user_id, USER_NOT_FOUND)
        check_user_management(
            self.actor,
            UserAction.DELETE,
            user.role,
            user.company_id,
            target_user_id=user.id,
        )
        deleted = DeletedUser.model_validate(user)
        self.db.delete(user)
        self._commit("excluir usuário")
        self._logger.warning(f"User {deleted.id} deleted by {self.actor.user_id}")
        return deleted
