import uuid
import logging
from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import commit_or_raise
from app.core.errors import NotFoundError, ValidationError
from app.core.security import BOOKING_PERMISSIONS, Principal, ensure_any_permission
from app.modules.bookings.repository import BookingRepository
from app.modules.reports.models import PatientReport
from app.modules.reports.repository import ReportRepository
from app.modules.reports.schemas import MedicationIn, ReportWrite

logger = logging.getLogger(__name__)

def _blank_to_none(value: str | None) -> str | None:
    value = (value or "").strip()
    return value or None

def normalize_medications(items: list[MedicationIn]) -> list[dict]:
    """Trim every field and drop rows with neither a name nor a dosage."""
    out = []
    for m in items:
        name = (m.medication_name or "").strip()
        dosage = (m.dosage or "").strip()
        if not name and not dosage:
            continue
        out.append({
            "medication_name": name,
            "dosage": dosage,
            "frequency": _blank_to_none(m.frequency),
            "notes": _blank_to_none(m.notes),
        })
    return out

def _validated(payload: ReportWrite) -> tuple[str, str | None, list[dict]]:
    condition = (payload.medical_condition or "").strip()
    if not condition:
        raise ValidationError("Medical condition is required", {"medical_condition": "required"})
    return condition, _blank_to_none(payload.notes), normalize_medications(payload.medications)

class ReportService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.reports = ReportRepository(session)
        self.bookings = BookingRepository(session)

    async def _ensure_booking(self, booking_id: uuid.UUID) -> None:
        if not await self.bookings.get(booking_id):
            raise NotFoundError("Booking not found")

    async def get(self, booking_id: uuid.UUID) -> PatientReport:
        await self._ensure_booking(booking_id)
        obj = await self.reports.get_for_booking(booking_id)
        if not obj:
            raise NotFoundError("This booking has no report yet")
        return obj

    async def create(self, principal: Principal | None, booking_id: uuid.UUID, payload: ReportWrite) -> PatientReport:
        ensure_any_permission(principal, BOOKING_PERMISSIONS, "write patient reports")
        condition, notes, medications = _validated(payload)
        await self._ensure_booking(booking_id)
        if await self.reports.get_for_booking(booking_id):
            raise ValidationError("This booking already has a report; update it instead", {"report": "already exists"})
        obj = await self.reports.create(booking_id, condition, notes, medications)
        await commit_or_raise(self.session)
        logger.info(f"Report {obj.id} created for booking {booking_id} with {len(medications)} medication(s)")
        return obj

    async def update(self, principal: Principal | None, booking_id: uuid.UUID, payload: ReportWrite) -> PatientReport:
        ensure_any_permission(principal, BOOKING_PERMISSIONS, "write patient reports")
        condition, notes, medications = _validated(payload)
        await self._ensure_booking(booking_id)
        obj = await self.reports.get_for_booking(booking_id)
        if not obj:
            raise NotFoundError("This booking has no report yet")
        obj = await self.reports.replace(obj, condition, notes, medications)
        obj.updated_at = datetime.now(timezone.utc)
        await commit_or_raise(self.session)
        logger.info(f"Report {obj.id} for booking {booking_id} replaced")
        return obj
