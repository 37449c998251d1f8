from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field, ValidationError as PydanticValidationError, field_validator
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_user
from backend.core.errors import AuthError
from backend.database import get_db
from backend.models.user import ROLES, User
from backend.schemas import CamelModel, UserSummary
from backend.services import auth_service
from backend.services.auth_service import CallerIdentity

router = APIRouter(tags=['auth'])

MIN_PASSWORD_LENGTH = 6


def normalize_email(value, handler) -> str:
    if isinstance(value, str):
        value = value.strip().lower()
    try:
        return handler(value)
    except PydanticValidationError as exc:
        raise ValueError('Valid email is required') from exc


class RegisterRequest(BaseModel):
    name: str = Field(default='', validate_default=True)
    email: EmailStr = Field(default='', validate_default=True)
    password: str = Field(default='', validate_default=True)
    role: str | None = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Name is required')
        return normalized

    @field_validator('email', mode='wrap')
    @classmethod
    def validate_email(cls, value, handler) -> str:
        return normalize_email(value, handler)

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValueError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')
        return value

    @field_validator('role')
    @classmethod
    def validate_role(cls, value: str | None) -> str | None:
        if value is None:
            return None
        if value not in ROLES:
            raise ValueError('Role must be student or admin')
        return value


class LoginRequest(BaseModel):
    email: EmailStr = Field(default='', validate_default=True)
    password: str = Field(default='', validate_default=True)

    @field_validator('email', mode='wrap')
    @classmethod
    def validate_email(cls, value, handler) -> str:
        return normalize_email(value, handler)

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not value:
            raise ValueError('Password is required')
        return value


class AuthResponse(CamelModel):
    message: str
    token: str
    user: UserSummary


class MeResponse(CamelModel):
    user: UserSummary


@router.post('/register', response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    token, user = auth_service.register(db, data.name, data.email, data.password, data.role)
    return AuthResponse(message='User registered successfully', token=token, user=UserSummary.from_user(user))


@router.post('/login', response_model=AuthResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    token, user = auth_service.login(db, data.email, data.password)
    return AuthResponse(message='Login successful', token=token, user=UserSummary.from_user(user))


@router.get('/me', response_model=MeResponse)
def me(caller: CallerIdentity = Depends(get_current_user), db: Session = Depends(get_db)):
    user = db.get(User, caller.id)
    if user is None:
        raise AuthError('User not found')
    return MeResponse(user=UserSummary.from_user(user))
