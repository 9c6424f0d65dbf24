import uuid
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.db import get_session
from app.core.redis import RedisManager, get_session_store
from app.core.security import Permission, Principal, get_principal, require_full_admin, require_permission
from app.modules.staff.schemas import (
    LoginRequest, LoginResponse, MeOut, StaffCreate, StaffOut, StaffStatusChange, StaffUpdate,
)
from app.modules.staff.service import StaffService

auth_router = APIRouter()
router = APIRouter()

def svc(session: AsyncSession = Depends(get_session), store: RedisManager = Depends(get_session_store)) -> StaffService:
    return StaffService(session, store)

# ---- Auth ----

@auth_router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, response: Response, service: StaffService = Depends(svc)):
    result = await service.login(payload)
    # mirrored into a cookie for page-level route protection
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        result.token,
        max_age=settings.SESSION_TTL_HOURS * 3600,
        path="/",
        samesite="lax",
        secure=settings.COOKIE_SECURE,
        httponly=False,
    )
    return result

@auth_router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(response: Response, principal: Principal = Depends(get_principal), service: StaffService = Depends(svc)):
    await service.logout(principal)
    response.delete_cookie(settings.SESSION_COOKIE_NAME, path="/")

@auth_router.get("/me", response_model=MeOut)
async def me(principal: Principal = Depends(get_principal), service: StaffService = Depends(svc)):
    return service.me(principal)

# ---- Staff accounts ----

@router.get("", response_model=list[StaffOut], dependencies=[Depends(require_permission(Permission.MANAGE_ACCOUNTS))])
async def list_staff(service: StaffService = Depends(svc)):
    return await service.list()

@router.post("", response_model=StaffOut, status_code=status.HTTP_201_CREATED)
async def create_staff(
    payload: StaffCreate,
    principal: Principal = Depends(require_full_admin()),
    service: StaffService = Depends(svc),
):
    return await service.create(principal, payload)

@router.put("/{staff_id}", response_model=StaffOut)
async def update_staff(
    staff_id: uuid.UUID,
    payload: StaffUpdate,
    principal: Principal = Depends(require_full_admin()),
    service: StaffService = Depends(svc),
):
    return await service.update(principal, staff_id, payload)

@router.patch("/{staff_id}/status", response_model=StaffOut)
async def change_staff_status(
    staff_id: uuid.UUID,
    payload: StaffStatusChange,
    principal: Principal = Depends(require_full_admin()),
    service: StaffService = Depends(svc),
):
    return await service.set_active(principal, staff_id, payload.is_active)

@router.delete("/{staff_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_staff(
    staff_id: uuid.UUID,
    confirm: bool = False,
    principal: Principal = Depends(require_full_admin()),
    service: StaffService = Depends(svc),
):
    await service.delete(principal, staff_id, confirmed=confirm)
