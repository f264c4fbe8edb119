import os

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./berichtsheft.db")
DATABASE_ECHO = _get_bool(os.getenv("DATABASE_ECHO"), default=False)

AUTH_SECRET = os.getenv("AUTH_SECRET", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
TOKEN_EXPIRES_DAYS = int(os.getenv("TOKEN_EXPIRES_DAYS", "7"))

AUTH_COOKIE_NAME = os.getenv("AUTH_COOKIE_NAME", "authToken")

CORS_ORIGINS = _get_list(os.getenv("CORS_ORIGINS"), default=["http://localhost:3000"])

SEED_INSTRUCTOR_EMAIL = os.getenv("SEED_INSTRUCTOR_EMAIL", "admin100@example.com")
SEED_INSTRUCTOR_PASSWORD = os.getenv("SEED_INSTRUCTOR_PASSWORD", "admin100")
SEED_INSTRUCTOR_NAME = os.getenv("SEED_INSTRUCTOR_NAME", "Instructor Admin")


def is_production() -> bool:
    return APP_ENV.lower() == "production"


def validate_runtime_config() -> None:
    if not AUTH_SECRET:
        raise RuntimeError("AUTH_SECRET is not set.")
    if is_production() and AUTH_SECRET == "change-me":
        raise RuntimeError("AUTH_SECRET must be set in production.")
