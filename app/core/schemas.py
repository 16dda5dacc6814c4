from typing import Any, ClassVar, Dict, FrozenSet, Generic, List, Optional, TypeVar
from pydantic import BaseModel, Field
from datetime import datetime, timezone

from app.core.exceptions import InvalidRequestError

T = TypeVar("T")


class ErrorInfo(BaseModel):
    msg: str
    code: str = "ERROR"
    field: Optional[str] = None


class ApiResponse(BaseModel, Generic[T]):
    success: bool
    data: Optional[T] = None
    message: Optional[str] = None
    metadata: Dict[str, Any] = {}
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def ok(cls, data: T = None, message: Optional[str] = None, metadata: Optional[Dict[str, Any]] = None) -> "ApiResponse[T]":
        return cls(success=True, data=data, message=message, metadata=metadata or {})


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    errors: List[ErrorInfo] = []
    details: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary with JSON-serializable values."""
        return self.model_dump(mode="json", exclude_none=True)

    @classmethod
    def fail(
        cls,
        message: str,
        code: str = "ERROR",
        errors: Optional[List[ErrorInfo]] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> "ErrorResponse":
        return cls(message=message, errors=errors or [ErrorInfo(msg=message, code=code)], details=details)


class PatchSchema(BaseModel):
    """
    Partial update payload. Only fields present in the request change;
    an explicit null is accepted only for fields listed in NULLABLE_FIELDS.
    """
    NULLABLE_FIELDS: ClassVar[FrozenSet[str]] = frozenset()

    def changes(self) -> Dict[str, Any]:
        changes = self.model_dump(exclude_unset=True)
        for field, value in changes.items():
            if value is None and field not in self.NULLABLE_FIELDS:
                raise InvalidRequestError(f"Campo '{field}' não pode ser nulo")
        if not changes:
            raise InvalidRequestError("Nenhum campo foi fornecido para atualização")
        return changes
