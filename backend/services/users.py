import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from backend.auth.passwords import hash_password, verify_password
from backend.core.errors import InternalError, InvalidInput, Unauthenticated
from backend.models.user import Role, User

logger = logging.getLogger(__name__)

SELF_REGISTER_ROLES = frozenset({Role.AZUBI, Role.AUSBILDER})


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def register_user(db: Session, email: str, password: str, role: Role, name: str | None = None) -> User:
    if role not in SELF_REGISTER_ROLES:
        raise InvalidInput("Invalid role.")
    if get_user_by_email(db, email) is not None:
        raise InvalidInput("User already exists.")

    user = User(
        email=normalize_email(email),
        hashed_password=hash_password(password),
        role=role,
        name=name or None,
    )
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError as exc:
        # Lost a race against a concurrent registration with the same email.
        db.rollback()
        raise InvalidInput("User already exists.") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to register user %s", email)
        raise InternalError("Could not create user.") from exc

    logger.info("Registered %s user %s", user.role.value, user.id)
    return user


def authenticate_user(db: Session, email: str, password: str) -> User:
    user = get_user_by_email(db, email)
    if user is None or not verify_password(password, user.hashed_password):
        raise Unauthenticated("Invalid credentials.")
    return user


def ensure_user(db: Session, email: str, password: str, role: Role, name: str | None = None) -> tuple[User, bool]:
    """Create the account unless one with that email exists. Returns (user, created)."""
    existing = get_user_by_email(db, email)
    if existing is not None:
        return existing, False

    user = User(
        email=normalize_email(email),
        hashed_password=hash_password(password),
        role=role,
        name=name,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user, True
