import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import InternalError, NotFoundError
from app.core.permissions import Actor
from app.models.company import Company

ModelT = TypeVar("ModelT")


class BaseService:
    """
    Common plumbing for domain services: one session, an optional acting
    identity, and commit/rollback handling that maps storage failures to
    InternalError.
    """

    def __init__(self, db: Session, actor: Optional[Actor] = None):
        self.db = db
        self.actor = actor
        self._logger = logging.getLogger(self.__class__.__module__)

    def _commit(self, context: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            self._logger.error(f"{context} failed: {e}", exc_info=True)
            raise InternalError(f"Erro ao {context}")

    def _get_or_404(self, model: Type[ModelT], obj_id: UUID, message: str) -> ModelT:
        obj = self.db.get(model, obj_id)
        if obj is None:
            raise NotFoundError(message)
        return obj

    def _resolve_company(self, company_id: UUID) -> Company:
        return self._get_or_404(Company, company_id, "Empresa não encontrada")

    @staticmethod
    def _apply_patch(obj: Any, changes: Dict[str, Any]) -> None:
        for field, value in changes.items():
            setattr(obj, field, value)
        if hasattr(obj, "updated_at"):
            obj.updated_at = datetime.now(timezone.utc)
