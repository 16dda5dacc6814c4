import re
import secrets

from app.core.exceptions import InvalidRequestError

TEMPORARY_PASSWORD_CHARSET = (
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789!@#$%&*"
)
TEMPORARY_PASSWORD_LENGTH = 12
MIN_PASSWORD_LENGTH = 8


def validate_password_strength(password: str) -> None:
    """Reject passwords shorter than 8 chars or missing upper, lower or digit."""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidRequestError("Senha deve ter pelo menos 8 caracteres")
    if not re.search(r"[A-Z]", password):
        raise InvalidRequestError("Senha deve conter pelo menos uma letra maiúscula")
    if not re.search(r"[a-z]", password):
        raise InvalidRequestError("Senha deve conter pelo menos uma letra minúscula")
    if not re.search(r"[0-9]", password):
        raise InvalidRequestError("Senha deve conter pelo menos um número")


def generate_temporary_password() -> str:
    """Random password that always satisfies validate_password_strength."""
    while True:
        candidate = "".join(
            secrets.choice(TEMPORARY_PASSWORD_CHARSET) for _ in range(TEMPORARY_PASSWORD_LENGTH)
        )
        if (
            re.search(r"[A-Z]", candidate)
            and re.search(r"[a-z]", candidate)
            and re.search(r"[0-9]", candidate)
        ):
            return candidate
