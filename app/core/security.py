import enum
import hashlib
import uuid
from datetime import datetime, timedelta, timezone
from typing import Annotated, Literal, Iterable

import bcrypt
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from pydantic import BaseModel, ConfigDict, Field

from app.core.config import settings
from app.core.errors import AuthenticationError, AuthorizationError, ValidationError
from app.core.redis import RedisManager, get_session_store

http_bearer = HTTPBearer(auto_error=False)


class Permission(str, enum.Enum):
    MANAGE_ONLINE_BOOKINGS = "manage_online_bookings"
    MANAGE_DAILY_BOOKINGS = "manage_daily_bookings"
    MANAGE_ACCOUNTS = "manage_accounts"


class FullAdmin(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["full_admin"] = "full_admin"

    def allows(self, permission: Permission) -> bool:
        return True


class Restricted(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["restricted"] = "restricted"
    permissions: frozenset[Permission] = frozenset()

    def allows(self, permission: Permission) -> bool:
        return permission in self.permissions


Access = Annotated[FullAdmin | Restricted, Field(discriminator="kind")]


def normalize_permissions(raw: Iterable | None) -> frozenset[Permission]:
    """Accept ["manage_accounts", ...] or [{"name": "manage_accounts"}, ...]."""
    if raw is None:
        return frozenset()
    if isinstance(raw, (str, bytes, dict)):
        raise ValidationError("Permissions must be a list", {"permissions": "expected a list"})
    out = set()
    for item in raw:
        name = item.get("name") if isinstance(item, dict) else item
        if isinstance(name, Permission):
            out.add(name)
            continue
        try:
            out.add(Permission(str(name).strip()))
        except ValueError:
            raise ValidationError(f"Unknown permission: {name}", {"permissions": f"unknown permission {name!r}"})
    return frozenset(out)


def access_for(is_full_admin: bool, permissions: Iterable | None) -> FullAdmin | Restricted:
    # Full admin comes only from the explicit flag; an empty list is just an empty restriction.
    if is_full_admin:
        return FullAdmin()
    return Restricted(permissions=normalize_permissions(permissions))


class Principal(BaseModel):
    staff_id: uuid.UUID
    session_id: str
    name: str
    email: str
    access: Access

    @property
    def is_full_admin(self) -> bool:
        return isinstance(self.access, FullAdmin)

    def can(self, permission: Permission) -> bool:
        return self.access.allows(permission)


def ensure_full_admin(principal: Principal | None, action: str) -> None:
    """Service-side re-check for admin-only writes."""
    if principal is None or not principal.is_full_admin:
        raise AuthorizationError(f"Only a full admin can {action}.")


BOOKING_PERMISSIONS = (Permission.MANAGE_ONLINE_BOOKINGS, Permission.MANAGE_DAILY_BOOKINGS)


def ensure_any_permission(principal: Principal | None, needed: Iterable[Permission], action: str) -> None:
    """Service-side re-check for staff writes: signed in and holding one of `needed`."""
    if principal is None or not any(principal.can(p) for p in needed):
        raise AuthorizationError(f"You do not have permission to {action}.")


# ---- Passwords ----

def _prehash(password: str) -> bytes:
    # SHA-256 first keeps any password within bcrypt's 72-byte input limit
    return hashlib.sha256(password.encode("utf-8")).hexdigest().encode("ascii")


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_prehash(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(_prehash(password), hashed.encode("utf-8"))
    except ValueError:
        return False


# ---- Tokens ----

def issue_token(staff_id: uuid.UUID, now: datetime | None = None) -> tuple[str, str, datetime]:
    """Return (token, session id, expiry)."""
    now = now or datetime.now(timezone.utc)
    expires_at = now + timedelta(hours=settings.SESSION_TTL_HOURS)
    session_id = uuid.uuid4().hex
    payload = {"sub": str(staff_id), "jti": session_id, "iat": int(now.timestamp()), "exp": int(expires_at.timestamp())}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALG), session_id, expires_at


def _decode_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
    except JWTError as e:
        raise AuthenticationError(f"Invalid token: {e}")
    if not payload.get("sub") or not payload.get("jti"):
        raise AuthenticationError("Invalid token: missing claims")
    return payload


def _credential(request: Request, creds: HTTPAuthorizationCredentials | None) -> str | None:
    if creds is not None:
        return creds.credentials
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


# ---- Dependencies ----

async def get_principal(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    store: RedisManager = Depends(get_session_store),
) -> Principal:
    token = _credential(request, creds)
    if not token:
        raise AuthenticationError("Authentication required")
    payload = _decode_token(token)
    data = await store.get_session(payload["jti"])
    if not data or data.get("staff_id") != payload["sub"]:
        raise AuthenticationError("Session expired or logged out")
    return Principal.model_validate(data)


def require_permission(needed: Permission):
    def dep(principal: Principal = Depends(get_principal)) -> Principal:
        if not principal.can(needed):
            raise AuthorizationError(f"Missing permission: {needed.value}")
        return principal
    return dep


def require_any_permission(*needed: Permission):
    def dep(principal: Principal = Depends(get_principal)) -> Principal:
        if not any(principal.can(p) for p in needed):
            raise AuthorizationError("Missing permission: one of " + ", ".join(p.value for p in needed))
        return principal
    return dep


def require_full_admin():
    def dep(principal: Principal = Depends(get_principal)) -> Principal:
        if not principal.is_full_admin:
            raise AuthorizationError("Admin only")
        return principal
    return dep
