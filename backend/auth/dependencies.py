from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from backend.auth import jwt_handler
from backend.auth.jwt_handler import TokenIdentity
from backend.core import config
from backend.core.errors import Unauthenticated
from backend.database import get_db
from backend.models.user import User

security = HTTPBearer(auto_error=False)


def get_current_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> TokenIdentity:
    token = request.cookies.get(config.AUTH_COOKIE_NAME)
    if not token and credentials is not None:
        token = credentials.credentials
    if not token:
        raise Unauthenticated("Not authenticated.")
    return jwt_handler.decode_access_token(token)


def get_current_user(
    identity: TokenIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> User:
    user = db.get(User, identity.id)
    if user is None:
        raise Unauthenticated("User not found.")
    return user
