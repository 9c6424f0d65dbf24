import uuid
from datetime import date
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_session
from app.core.security import (
    BOOKING_PERMISSIONS, Permission, Principal, require_any_permission, require_permission,
)
from app.modules.bookings.schemas import (
    BookingDetailOut, BookingHistoryOut, BookingOut, BookingStatusChange, BookingUpdate,
    ClinicBookingCreate, ExaminationStatusChange, OnlineBookingCreate, OnlineBookingCreated,
)
from app.modules.bookings.service import BookingService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> BookingService:
    return BookingService(session)

_any_booking_permission = require_any_permission(*BOOKING_PERMISSIONS)

STATUS_PATTERN = "^(pending|confirmed|cancelled|rejected)$"

# ---- Online (public create, staff review) ----

@router.post("/online", response_model=OnlineBookingCreated, status_code=status.HTTP_201_CREATED)
async def create_online_booking(
    payload: OnlineBookingCreate,
    service: BookingService = Depends(svc),
):
    obj = await service.create_online_booking(payload)
    return OnlineBookingCreated(booking=BookingOut.model_validate(obj))

@router.get("/online", response_model=list[BookingOut],
            dependencies=[Depends(require_permission(Permission.MANAGE_ONLINE_BOOKINGS))])
async def list_online_bookings(
    status: str | None = Query(default=None, pattern=STATUS_PATTERN),
    date: date | None = None,
    service: BookingService = Depends(svc),
):
    return await service.list(booking_type="online", status=status, day=date, newest_first=True)

# ---- Daily (clinic desk) ----

@router.get("/all", response_model=list[BookingOut],
            dependencies=[Depends(require_permission(Permission.MANAGE_DAILY_BOOKINGS))])
async def list_all_bookings(
    type: str | None = Query(default=None, pattern="^(online|clinic)$"),
    status: str | None = Query(default=None, pattern=STATUS_PATTERN),
    date: date | None = None,
    service: BookingService = Depends(svc),
):
    return await service.list(booking_type=type, status=status, day=date)

@router.post("/clinic", response_model=BookingOut, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_permission(Permission.MANAGE_DAILY_BOOKINGS))])
async def create_clinic_booking(
    payload: ClinicBookingCreate,
    service: BookingService = Depends(svc),
):
    return await service.create_clinic_booking(payload)

@router.get("/{booking_id}", response_model=BookingDetailOut, dependencies=[Depends(_any_booking_permission)])
async def get_booking(
    booking_id: uuid.UUID,
    service: BookingService = Depends(svc),
):
    return await service.get(booking_id)

@router.put("/{booking_id}", response_model=BookingOut,
            dependencies=[Depends(require_permission(Permission.MANAGE_DAILY_BOOKINGS))])
async def update_booking(
    booking_id: uuid.UUID,
    payload: BookingUpdate,
    service: BookingService = Depends(svc),
):
    return await service.update_booking(booking_id, payload)

@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT,
               dependencies=[Depends(require_permission(Permission.MANAGE_DAILY_BOOKINGS))])
async def delete_booking(
    booking_id: uuid.UUID,
    confirm: bool = False,
    service: BookingService = Depends(svc),
):
    await service.cancel_booking(booking_id, confirmed=confirm)

# ---- Lifecycle ----

@router.patch("/online/{booking_id}/status", response_model=BookingOut, dependencies=[Depends(_any_booking_permission)])
@router.patch("/{booking_id}/status", response_model=BookingOut, dependencies=[Depends(_any_booking_permission)])
async def change_booking_status(
    booking_id: uuid.UUID,
    payload: BookingStatusChange,
    service: BookingService = Depends(svc),
):
    return await service.set_status(booking_id, payload.status)

@router.patch("/{booking_id}/examination-status", response_model=BookingOut)
async def change_examination_status(
    booking_id: uuid.UUID,
    payload: ExaminationStatusChange,
    principal: Principal = Depends(_any_booking_permission),
    service: BookingService = Depends(svc),
):
    return await service.set_examination_status(principal, booking_id, payload.examination_status)

# ---- Patient history ----

@router.get("/{booking_id}/history", response_model=BookingHistoryOut, dependencies=[Depends(_any_booking_permission)])
async def booking_history(
    booking_id: uuid.UUID,
    service: BookingService = Depends(svc),
):
    return await service.history(booking_id)
