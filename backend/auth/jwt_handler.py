from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from backend.core import config
from backend.core.errors import Unauthenticated
from backend.models.user import Role


@dataclass(frozen=True)
class TokenIdentity:
    id: int
    role: Role


def _secret() -> str:
    if not config.AUTH_SECRET:
        raise RuntimeError("AUTH_SECRET is not set.")
    return config.AUTH_SECRET


def create_access_token(user_id: int, role: Role, expires_days: int | None = None) -> str:
    expire_days = expires_days or config.TOKEN_EXPIRES_DAYS
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "role": Role(role).value,
        "iat": now,
        "exp": now + timedelta(days=expire_days),
    }
    return jwt.encode(payload, _secret(), algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> TokenIdentity:
    try:
        payload = jwt.decode(token, _secret(), algorithms=[config.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise Unauthenticated("Token expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise Unauthenticated("Invalid token.") from exc

    try:
        return TokenIdentity(id=int(payload["sub"]), role=Role(payload["role"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise Unauthenticated("Invalid token subject.") from exc
