import time
import jwt
from typing import Any, Dict

from closet.core.config import settings

ACCESS_TTL = 3600


def mint_access(user_id: str, ttl: int = ACCESS_TTL) -> str:
    """Mint a token shaped like the ones the auth provider issues (local tooling and tests)."""
    now = int(time.time())
    claims = {"sub": user_id, "iat": now, "exp": now + ttl, "aud": settings.JWT_AUDIENCE, "role": "authenticated"}
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def decode_token(tok: str) -> Dict[str, Any]:
    return jwt.decode(tok, settings.JWT_SECRET, algorithms=[settings.JWT_ALG], audience=settings.JWT_AUDIENCE)
