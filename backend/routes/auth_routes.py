from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from backend.auth import jwt_handler
from backend.auth.dependencies import get_current_user
from backend.core import config
from backend.database import get_db
from backend.models.user import Role, User
from backend.services import users

router = APIRouter(tags=['auth'])


def _require_text(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValueError(f'{field_name} is required.')
    return value


class RegisterRequest(BaseModel):
    email: str
    password: str
    name: str | None = None
    role: Role

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _require_text(value, 'Email').strip().lower()

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        return _require_text(value, 'Password')


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _require_text(value, 'Email').strip().lower()

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        return _require_text(value, 'Password')


class UserSummaryResponse(BaseModel):
    id: int
    role: Role
    email: str

    class Config:
        from_attributes = True


class UserEnvelopeResponse(BaseModel):
    user: UserSummaryResponse


class MeResponse(BaseModel):
    id: int
    email: str
    role: Role
    name: str | None = None

    class Config:
        from_attributes = True


def set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=config.AUTH_COOKIE_NAME,
        value=token,
        max_age=config.TOKEN_EXPIRES_DAYS * 24 * 60 * 60,
        path='/',
        httponly=True,
        secure=config.is_production(),
        samesite='lax',
    )


def _login_response(response: Response, user: User) -> UserEnvelopeResponse:
    token = jwt_handler.create_access_token(user_id=user.id, role=user.role)
    set_auth_cookie(response, token)
    return UserEnvelopeResponse(user=UserSummaryResponse.model_validate(user))


@router.post('/register', response_model=UserEnvelopeResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, response: Response, db: Session = Depends(get_db)):
    user = users.register_user(db, email=data.email, password=data.password, role=data.role, name=data.name)
    return _login_response(response, user)


@router.post('/login', response_model=UserEnvelopeResponse)
def login(data: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user = users.authenticate_user(db, email=data.email, password=data.password)
    return _login_response(response, user)


@router.post('/logout')
def logout(response: Response):
    response.delete_cookie(
        key=config.AUTH_COOKIE_NAME,
        path='/',
        httponly=True,
        secure=config.is_production(),
        samesite='lax',
    )
    return {'message': 'Logged out'}


@router.get('/me', response_model=MeResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user
