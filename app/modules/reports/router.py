import uuid
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_session
from app.core.security import BOOKING_PERMISSIONS, Principal, require_any_permission
from app.modules.reports.schemas import ReportOut, ReportWrite
from app.modules.reports.service import ReportService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> ReportService:
    return ReportService(session)

_any_booking_permission = require_any_permission(*BOOKING_PERMISSIONS)

@router.get("/{booking_id}/report", response_model=ReportOut, dependencies=[Depends(_any_booking_permission)])
async def get_report(
    booking_id: uuid.UUID,
    service: ReportService = Depends(svc),
):
    return await service.get(booking_id)

@router.post("/{booking_id}/report", response_model=ReportOut, status_code=status.HTTP_201_CREATED)
async def create_report(
    booking_id: uuid.UUID,
    payload: ReportWrite,
    principal: Principal = Depends(_any_booking_permission),
    service: ReportService = Depends(svc),
):
    return await service.create(principal, booking_id, payload)

@router.put("/{booking_id}/report", response_model=ReportOut)
async def update_report(
    booking_id: uuid.UUID,
    payload: ReportWrite,
    principal: Principal = Depends(_any_booking_permission),
    service: ReportService = Depends(svc),
):
    return await service.update(principal, booking_id, payload)
