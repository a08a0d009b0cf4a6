import httpx
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from alumniconnect.auth.identity_client import IdentityClient
from alumniconnect.auth.session_provider import AuthSessionProvider
from alumniconnect.core.http_client import get_http_client
from alumniconnect.database import get_db
from alumniconnect.models.profile import Role
from alumniconnect.schemas.auth import SessionContext, User

ACCESS_TOKEN_COOKIE = 'access_token'
REFRESH_TOKEN_COOKIE = 'refresh_token'

security = HTTPBearer(auto_error=False)


def get_identity_client(http_client: httpx.AsyncClient = Depends(get_http_client)) -> IdentityClient:
    return IdentityClient(http_client)


def get_session_provider(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    identity: IdentityClient = Depends(get_identity_client),
    db: Session = Depends(get_db),
) -> AuthSessionProvider:
    access_token = credentials.credentials if credentials else request.cookies.get(ACCESS_TOKEN_COOKIE)
    provider = AuthSessionProvider(identity, db)
    provider.bootstrap(access_token, request.cookies.get(REFRESH_TOKEN_COOKIE))
    return provider


def get_session_context(provider: AuthSessionProvider = Depends(get_session_provider)) -> SessionContext:
    return provider.context


def get_current_user(context: SessionContext = Depends(get_session_context)) -> User:
    if context.user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Not authenticated')
    return context.user


def require_role(*allowed_roles: Role):
    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required role(s): {[role.value for role in allowed_roles]}",
            )
        return current_user
    return role_checker


require_student = require_role(Role.STUDENT)
require_alumni = require_role(Role.ALUMNI)
require_admin = require_role(Role.ADMIN)
