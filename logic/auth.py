import logging
import secrets
from datetime import datetime, timedelta
from uuid import UUID
from pydantic import BaseModel
from sqlalchemy.engine import Engine
from sqlmodel import Session, select
from config import settings
from database.models import AdminUser, ClientUser
from enums import UserRoleEnum

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password. Please check your credentials."


class AuthUser(BaseModel):
    id: UUID
    email: str
    username: str
    full_name: str | None = None
    role: UserRoleEnum


class UserSession(BaseModel): #expiring session handed back to the caller as a bearer token
    token: str
    user: AuthUser
    issued_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or datetime.now()) > self.expires_at


class AuthResult(BaseModel):
    user: AuthUser | None = None
    is_authenticated: bool = False
    session: UserSession | None = None
    error: str | None = None


class AuthContext:
    """Sessions for both roles, passed to whoever needs to know who is calling."""

    def __init__(self, engine: Engine, lifetime: timedelta | None = None):
        self.engine = engine
        self.lifetime = lifetime or timedelta(hours=settings.session_lifetime_hours)
        self.sessions: dict[str, UserSession] = {}

    def _find_user(self, role: UserRoleEnum, email: str, password: str) -> AuthUser | None:
        with Session(self.engine) as session:
            if role == UserRoleEnum.admin:
                user = session.exec(select(AdminUser).where(AdminUser.email == email)).first()
            else:
                user = session.exec(select(ClientUser).where(ClientUser.email == email, ClientUser.is_active == True)).first()
            if not user or user.password != password: #plaintext demo credentials
                return None
            user.last_login = datetime.now()
            session.add(user)
            session.commit()
            session.refresh(user)
            return AuthUser(id=user.id, email=user.email, username=user.username, full_name=getattr(user, "full_name", None), role=role)

    def login(self, role: UserRoleEnum, email: str, password: str, now: datetime | None = None) -> AuthResult:
        role = UserRoleEnum(role)
        self.purge_expired(now)
        user = self._find_user(role, email.strip().lower(), password)
        if user is None:
            logger.info("Failed %s login for %s", role.value, email)
            return AuthResult(error=INVALID_CREDENTIALS)
        now = now or datetime.now()
        session = UserSession(token=secrets.token_urlsafe(32), user=user, issued_at=now, expires_at=now + self.lifetime)
        self.sessions[session.token] = session
        logger.info("%s %s logged in", role.value, user.email)
        return AuthResult(user=user, is_authenticated=True, session=session)

    def check(self, token: str | None, now: datetime | None = None) -> AuthResult:
        session = self.sessions.get(token) if token else None
        if session is None:
            return AuthResult()
        if session.is_expired(now):
            self.sessions.pop(token, None)
            logger.info("Session for %s expired", session.user.email)
            return AuthResult(error="Session expired")
        return AuthResult(user=session.user, is_authenticated=True, session=session)

    def logout(self, token: str | None):
        self.sessions.pop(token, None)

    def purge_expired(self, now: datetime | None = None) -> int:
        expired_tokens = [token for token, session in self.sessions.items() if session.is_expired(now)]
        for token in expired_tokens:
            del self.sessions[token]
        return len(expired_tokens)
