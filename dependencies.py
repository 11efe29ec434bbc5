from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from database.database import engine
from enums import UserRoleEnum
from logic.auth import AuthContext, AuthResult, AuthUser
from logic.draft_store import SqlDraftStore
from logic.gateway import ProjectGateway
from logic.notifications import LoggingNotificationSink
from logic.sessions import FormSessionRegistry
from logic.scheduler import AsyncioScheduler

bearer_scheme = HTTPBearer(auto_error=False) #a missing token means anonymous, not an error

auth_context = AuthContext(engine)
project_gateway = ProjectGateway(engine)
notification_sink = LoggingNotificationSink()
form_sessions = FormSessionRegistry()

def get_auth_context() -> AuthContext:
    return auth_context

def get_gateway() -> ProjectGateway:
    return project_gateway

def get_notifications() -> LoggingNotificationSink:
    return notification_sink

def get_scheduler_factory():
    return AsyncioScheduler #one scheduler per form so timer purposes never collide between forms

def get_draft_store_factory():
    return lambda scope: SqlDraftStore(engine, scope)

def get_form_sessions() -> FormSessionRegistry:
    return form_sessions

def get_current_auth(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    auth: AuthContext = Depends(get_auth_context),
) -> AuthResult:
    return auth.check(credentials.credentials if credentials else None)

class RoleChecker:
    def __init__(self, role: UserRoleEnum):
        self.role = role

    def __call__(self, auth_result: AuthResult = Depends(get_current_auth)) -> AuthUser:
        if not auth_result.is_authenticated:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=auth_result.error or "Not authenticated",
                headers={"WWW-Authenticate": "Bearer"},
            )
        if auth_result.user.role != self.role:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Operation not permitted")
        return auth_result.user

#pre-defined dependencies to use in routers
require_admin = RoleChecker(UserRoleEnum.admin)
require_client = RoleChecker(UserRoleEnum.client)
