"""
Authorization and tenant isolation rules.

Pure decisions over the acting identity; every function either returns the
value the caller should use or raises before any write happens. Rules are
checked in this order:

1. Nobody may delete their own account.
2. Admins bypass company scoping.
3. A non-admin without a company is denied everything company-scoped.
4. A non-admin only touches rows of their own company.
5. Managers never create, edit or delete admins, never move users between
   companies, never change a user's role and never (de)activate users. They
   may not delete other managers either.
6. A new user's company is explicit for admins and forced to the manager's
   own company otherwise.
7. Listings are filtered to the actor's company unless the actor is admin.
"""
import enum
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from app.core.exceptions import AccessDeniedError, InvalidRequestError
from app.models.user import User, UserRole

NO_COMPANY_MESSAGE = "Usuário deve estar associado a uma empresa"
OTHER_COMPANY_MESSAGE = "Acesso negado: recurso pertence a outra empresa"


class UserAction(str, enum.Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class Actor:
    user_id: UUID
    role: UserRole
    company_id: Optional[UUID] = None

    @classmethod
    def from_user(cls, user: User) -> "Actor":
        return cls(user_id=user.id, role=UserRole(user.role), company_id=user.company_id)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_manager(self) -> bool:
        return self.role == UserRole.MANAGER


def list_scope(actor: Actor) -> Optional[UUID]:
    """Company filter for collection reads; None means unrestricted (admin)."""
    if actor.is_admin:
        return None
    if actor.company_id is None:
        raise AccessDeniedError(NO_COMPANY_MESSAGE)
    return actor.company_id


def ensure_company_access(
    actor: Actor,
    target_company_id: Optional[UUID],
    message: str = OTHER_COMPANY_MESSAGE,
) -> None:
    if actor.is_admin:
        return
    if actor.company_id is None:
        raise AccessDeniedError(NO_COMPANY_MESSAGE)
    if target_company_id != actor.company_id:
        raise AccessDeniedError(message)


def resolve_owned_company(actor: Actor, requested_company_id: Optional[UUID]) -> UUID:
    """
    Company for a new team or developer.

    Admins may name any company and fall back to their own; everyone else
    always gets their own company regardless of the payload.
    """
    if actor.is_admin:
        company_id = requested_company_id or actor.company_id
        if company_id is None:
            raise InvalidRequestError("Empresa é obrigatória")
        return company_id
    if actor.company_id is None:
        raise AccessDeniedError(NO_COMPANY_MESSAGE)
    return actor.company_id


def resolve_new_user_company(actor: Actor, requested_company_id: Optional[UUID]) -> UUID:
    if actor.is_admin:
        if requested_company_id is None:
            raise InvalidRequestError("Admin deve especificar uma empresa para o usuário")
        return requested_company_id
    if actor.is_manager:
        if actor.company_id is None:
            raise AccessDeniedError("Manager deve estar associado a uma empresa")
        return actor.company_id
    raise AccessDeniedError("Apenas admins e managers podem criar usuários")


def check_user_management(
    actor: Actor,
    action: UserAction,
    target_role: UserRole,
    target_company_id: Optional[UUID],
    target_user_id: Optional[UUID] = None,
    new_role: Optional[UserRole] = None,
    changes_company: bool = False,
    changes_active: bool = False,
) -> None:
    """Decide whether the actor may perform a user-targeted operation."""
    if action == UserAction.DELETE and target_user_id is not None and target_user_id == actor.user_id:
        raise AccessDeniedError("Você não pode excluir sua própria conta")

    if actor.is_admin:
        return

    if not actor.is_manager:
        raise AccessDeniedError("Acesso negado. Apenas administradores e gerentes têm permissão")

    ensure_company_access(actor, target_company_id, "Sem permissão para gerenciar este usuário")

    if action == UserAction.READ:
        return

    if target_role == UserRole.ADMIN:
        raise AccessDeniedError("Managers não podem gerenciar administradores")
    if action == UserAction.DELETE and target_role == UserRole.MANAGER:
        raise AccessDeniedError("Sem permissão para excluir administradores ou gerentes")
    if new_role == UserRole.ADMIN:
        raise AccessDeniedError("Managers não podem promover usuários a administrador")
    if action == UserAction.UPDATE and new_role is not None and new_role != target_role:
        raise AccessDeniedError("Apenas administradores podem alterar o perfil do usuário")
    if changes_company:
        raise AccessDeniedError("Apenas administradores podem alterar a empresa do usuário")
    if changes_active:
        raise AccessDeniedError("Apenas administradores podem ativar/desativar usuários")
