from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

# Public, credential-bearing endpoints only; disabled under test
limiter = Limiter(key_func=get_remote_address, enabled=not settings.is_testing)
