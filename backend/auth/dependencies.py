from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from backend.models.user import ROLE_ADMIN, ROLE_STUDENT
from backend.services import auth_service
from backend.services.auth_service import CallerIdentity

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> CallerIdentity:
    token = credentials.credentials if credentials else None
    return auth_service.authenticate(token)


def require_student(caller: CallerIdentity = Depends(get_current_user)) -> CallerIdentity:
    auth_service.authorize(caller, ROLE_STUDENT)
    return caller


def require_admin(caller: CallerIdentity = Depends(get_current_user)) -> CallerIdentity:
    auth_service.authorize(caller, ROLE_ADMIN)
    return caller
