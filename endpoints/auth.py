from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from database.models import LoginRequest
from dependencies import bearer_scheme, get_auth_context, get_current_auth
from enums import UserRoleEnum
from logic.auth import AuthContext, AuthResult

router = APIRouter(prefix="/auth", tags=["Auth"])

def login_response(result: AuthResult) -> dict:
    if not result.is_authenticated:
        raise HTTPException(status_code=401, detail=result.error)
    return {
        "token": result.session.token,
        "expires_at": result.session.expires_at,
        "user": result.user.model_dump(mode="json"),
    }

@router.post("/admin/login", status_code=200)
def admin_login(credentials: LoginRequest, auth: AuthContext = Depends(get_auth_context)):
    return login_response(auth.login(UserRoleEnum.admin, credentials.email, credentials.password))

@router.post("/client/login", status_code=200)
def client_login(credentials: LoginRequest, auth: AuthContext = Depends(get_auth_context)):
    return login_response(auth.login(UserRoleEnum.client, credentials.email, credentials.password))

@router.post("/logout", status_code=204)
def logout(credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme), auth: AuthContext = Depends(get_auth_context)):
    auth.logout(credentials.credentials if credentials else None)

@router.get("/me", status_code=200)
def current_user(auth_result: AuthResult = Depends(get_current_auth)):
    return {
        "user": auth_result.user.model_dump(mode="json") if auth_result.user else None,
        "is_authenticated": auth_result.is_authenticated,
        "expires_at": auth_result.session.expires_at if auth_result.session else None,
    }
