"""Registration, login and bearer-token checks."""

import logging
from dataclasses import dataclass

import jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.auth import jwt_handler
from backend.auth.passwords import hash_password, pwd_context, verify_password
from backend.core.errors import AuthError, ConflictError, ForbiddenError
from backend.models.user import ROLE_STUDENT, ROLES, User

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


@dataclass(frozen=True)
class CallerIdentity:
    id: str
    role: str


def issue_token(user: User) -> str:
    return jwt_handler.create_access_token(subject=user.id, role=user.role)


def register(
    db: Session,
    name: str,
    email: str,
    password: str,
    role: str | None = None,
) -> tuple[str, User]:
    if db.query(User.id).filter(User.email == email).first() is not None:
        raise ConflictError("User with this email already exists")

    user = User(
        name=name,
        email=email,
        hashed_password=hash_password(password),
        role=role or ROLE_STUDENT,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent registration for the same email.
        db.rollback()
        raise ConflictError("User with this email already exists") from exc
    db.refresh(user)

    logger.info("Registered user %s with role %s", user.id, user.role)
    return issue_token(user), user


def login(db: Session, email: str, password: str) -> tuple[str, User]:
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        pwd_context.dummy_verify()
        raise AuthError(INVALID_CREDENTIALS)

    if not verify_password(password, user.hashed_password):
        raise AuthError(INVALID_CREDENTIALS)

    return issue_token(user), user


def authenticate(token: str | None) -> CallerIdentity:
    if not token:
        raise AuthError("Access denied. No token provided.")

    try:
        payload = jwt_handler.decode_access_token(token)
    except jwt.ExpiredSignatureError as exc:
        raise AuthError("Token has expired") from exc
    except jwt.PyJWTError as exc:
        raise AuthError("Invalid token") from exc

    subject = payload.get("sub")
    role = payload.get("role")
    if not subject or role not in ROLES:
        raise AuthError("Invalid token")

    return CallerIdentity(id=str(subject), role=role)


def authorize(caller: CallerIdentity, required_role: str) -> None:
    if caller.role != required_role:
        raise ForbiddenError(f"Access denied. {required_role.capitalize()} access required.")
