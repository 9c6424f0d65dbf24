import uuid
import logging
from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import commit_or_raise
from app.core.errors import AuthenticationError, NotFoundError, ValidationError
from app.core.redis import RedisManager
from app.core.security import (
    Principal, access_for, ensure_full_admin, hash_password, issue_token, normalize_permissions, verify_password,
)
from app.modules.staff.models import StaffMember
from app.modules.staff.repository import StaffRepository
from app.modules.staff.schemas import LoginRequest, LoginResponse, MeOut, StaffCreate, StaffUpdate

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8

def _now() -> datetime:
    return datetime.now(timezone.utc)

def _check_password(password: str | None) -> str:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
            {"password": f"at least {MIN_PASSWORD_LENGTH} characters"},
        )
    return password

def _permission_values(raw) -> list[str]:
    return sorted(p.value for p in normalize_permissions(raw))

class StaffService:
    def __init__(self, session: AsyncSession, store: RedisManager):
        self.session = session
        self.store = store
        self.staff = StaffRepository(session)

    async def _get_or_404(self, staff_id: uuid.UUID) -> StaffMember:
        obj = await self.staff.get(staff_id)
        if not obj:
            raise NotFoundError("Staff member not found")
        return obj

    # ---- Sessions ----

    async def login(self, payload: LoginRequest) -> LoginResponse:
        member = await self.staff.get_by_email(payload.email)
        # one message for every failure so accounts cannot be enumerated
        if not member or not member.is_active or not verify_password(payload.password, member.password_hash):
            logger.warning(f"Failed login for {payload.email}")
            raise AuthenticationError("Invalid email or password")

        token, session_id, expires_at = issue_token(member.id)
        principal = Principal(
            staff_id=member.id,
            session_id=session_id,
            name=member.name,
            email=member.email,
            access=access_for(member.is_full_admin, member.permissions),
        )
        await self.store.set_session(session_id, str(member.id), principal.model_dump(mode="json"))
        logger.info(f"Staff {member.id} logged in")
        return LoginResponse(
            token=token,
            expires_at=expires_at,
            id=member.id,
            name=member.name,
            email=member.email,
            role=member.role,
            is_full_admin=member.is_full_admin,
            permissions=_permission_values(member.permissions),
        )

    async def logout(self, principal: Principal) -> None:
        await self.store.delete_session(principal.session_id)
        logger.info(f"Staff {principal.staff_id} logged out")

    def me(self, principal: Principal) -> MeOut:
        perms = [] if principal.is_full_admin else sorted(p.value for p in principal.access.permissions)
        return MeOut(
            id=principal.staff_id,
            name=principal.name,
            email=principal.email,
            is_full_admin=principal.is_full_admin,
            permissions=perms,
        )

    # ---- Staff accounts ----

    async def list(self):
        return await self.staff.list()

    async def create(self, principal: Principal | None, payload: StaffCreate) -> StaffMember:
        ensure_full_admin(principal, "create staff accounts")
        password = _check_password(payload.password)
        permissions = _permission_values(payload.permissions)
        email = payload.email.strip().lower()
        if await self.staff.get_by_email(email):
            raise ValidationError("A staff member with this email already exists", {"email": "already in use"})
        obj = await self.staff.create(
            name=payload.name.strip(),
            email=email,
            password_hash=hash_password(password),
            role=payload.role,
            is_active=True,
            is_full_admin=payload.is_full_admin,
            permissions=permissions,
        )
        await commit_or_raise(self.session)
        logger.info(f"Staff {obj.id} created by {principal.staff_id}")
        return obj

    async def update(self, principal: Principal | None, staff_id: uuid.UUID, payload: StaffUpdate) -> StaffMember:
        ensure_full_admin(principal, "edit staff accounts")
        data = payload.model_dump(exclude_unset=True)
        changes: dict = {}
        if data.get("name") is not None:
            changes["name"] = data["name"].strip()
        if data.get("password"):
            changes["password_hash"] = hash_password(_check_password(data["password"]))
        if data.get("role") is not None:
            changes["role"] = data["role"]
        if data.get("is_full_admin") is not None:
            if staff_id == principal.staff_id and not data["is_full_admin"]:
                raise ValidationError("You cannot remove your own admin access", {"is_full_admin": "own account"})
            changes["is_full_admin"] = data["is_full_admin"]
        if data.get("permissions") is not None:
            changes["permissions"] = _permission_values(data["permissions"])

        await self._get_or_404(staff_id)
        changes["updated_at"] = _now()
        obj = await self.staff.update(staff_id, **changes)
        await commit_or_raise(self.session)
        # access is copied into sessions at login; force a fresh login
        await self.store.revoke_staff_sessions(str(staff_id))
        logger.info(f"Staff {staff_id} updated by {principal.staff_id}")
        return obj

    async def set_active(self, principal: Principal | None, staff_id: uuid.UUID, is_active: bool) -> StaffMember:
        ensure_full_admin(principal, "activate or deactivate staff accounts")
        if staff_id == principal.staff_id and not is_active:
            raise ValidationError("You cannot deactivate your own account", {"is_active": "own account"})
        await self._get_or_404(staff_id)
        obj = await self.staff.update(staff_id, is_active=is_active, updated_at=_now())
        await commit_or_raise(self.session)
        if not is_active:
            await self.store.revoke_staff_sessions(str(staff_id))
        logger.info(f"Staff {staff_id} {'activated' if is_active else 'deactivated'} by {principal.staff_id}")
        return obj

    async def delete(self, principal: Principal | None, staff_id: uuid.UUID, *, confirmed: bool) -> None:
        ensure_full_admin(principal, "delete staff accounts")
        if not confirmed:
            raise ValidationError(
                "Deleting an account cannot be undone; repeat the request with confirm=true",
                {"confirm": "required"},
            )
        if staff_id == principal.staff_id:
            raise ValidationError("You cannot delete your own account", {"id": "own account"})
        await self._get_or_404(staff_id)
        await self.staff.delete(staff_id)
        await commit_or_raise(self.session)
        await self.store.revoke_staff_sessions(str(staff_id))
        logger.info(f"Staff {staff_id} deleted by {principal.staff_id}")
