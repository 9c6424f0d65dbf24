import uuid
import logging
from datetime import date as date_type, datetime, timezone
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clinic_time import day_bounds, ensure_clinic_tz
from app.core.db import commit_or_raise
from app.core.errors import NotFoundError, ValidationError
from app.core.security import BOOKING_PERMISSIONS, Principal, ensure_any_permission
from app.modules.bookings.history import build_patient_history
from app.modules.bookings.lifecycle import (
    BookingStatus, BookingType, check_transition, parse_examination_status, parse_status,
)
from app.modules.bookings.models import Booking
from app.modules.bookings.repository import BookingRepository
from app.modules.bookings.schemas import (
    BookingDetailOut, BookingHistoryOut, BookingUpdate, ClinicBookingCreate, OnlineBookingCreate,
)

logger = logging.getLogger(__name__)

def _now() -> datetime:
    return datetime.now(timezone.utc)

def _clean(value: str | None) -> str:
    return (value or "").strip()

def _require_core_fields(name: str | None, phone: str | None, when: datetime | None) -> None:
    errors = {}
    if not _clean(name):
        errors["name"] = "required"
    if not _clean(phone):
        errors["phone"] = "required"
    if when is None:
        errors["date"] = "required"
    if errors:
        raise ValidationError("Missing required fields: " + ", ".join(errors), errors)

class BookingService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.bookings = BookingRepository(session)

    async def _get_or_404(self, booking_id: uuid.UUID) -> Booking:
        obj = await self.bookings.get(booking_id)
        if not obj:
            raise NotFoundError("Booking not found")
        return obj

    # ---- Create ----

    async def create_online_booking(self, payload: OnlineBookingCreate) -> Booking:
        _require_core_fields(payload.name, payload.phone, payload.date)
        obj = await self.bookings.create(
            customer_name=_clean(payload.name),
            customer_phone=_clean(payload.phone),
            email=payload.email.lower() if payload.email else None,
            appointment_date=ensure_clinic_tz(payload.date),
            booking_type=BookingType.ONLINE.value,
            amount_paid=payload.amount if payload.amount is not None else Decimal("0"),
            status=BookingStatus.PENDING.value,
            examination_status=None,
        )
        await commit_or_raise(self.session)
        logger.info(f"Online booking {obj.id} requested for {obj.appointment_date.isoformat()}")
        return obj

    async def create_clinic_booking(self, payload: ClinicBookingCreate) -> Booking:
        _require_core_fields(payload.name, payload.phone, payload.date)
        obj = await self.bookings.create(
            customer_name=_clean(payload.name),
            customer_phone=_clean(payload.phone),
            appointment_date=ensure_clinic_tz(payload.date),
            booking_type=BookingType.CLINIC.value,
            visit_type=payload.visit_type.value,
            amount_paid=payload.amount_paid if payload.amount_paid is not None else Decimal("0"),
            status=payload.status.value,
            examination_status=None,
        )
        await commit_or_raise(self.session)
        logger.info(f"Clinic booking {obj.id} created with status {obj.status}")
        return obj

    # ---- Read ----

    async def get(self, booking_id: uuid.UUID) -> Booking:
        return await self._get_or_404(booking_id)

    async def list(self, *, booking_type: str | None = None, status: str | None = None,
                   day: date_type | None = None, newest_first: bool = False):
        if status is not None:
            status = parse_status(status).value
        if booking_type is not None:
            try:
                booking_type = BookingType(booking_type).value
            except ValueError:
                raise ValidationError(f"Unknown booking type '{booking_type}'", {"type": "must be online or clinic"})
        start = end = None
        if day is not None:
            start, end = day_bounds(day)
        return await self.bookings.list(
            booking_type=booking_type, status=status, start=start, end=end, newest_first=newest_first,
        )

    async def history(self, booking_id: uuid.UUID) -> BookingHistoryOut:
        # recomputed on every call; bookings change independently of this view
        current = await self._get_or_404(booking_id)
        others = await self.bookings.list_by_phone(current.customer_phone, exclude_id=current.id)
        return BookingHistoryOut(
            current_booking=BookingDetailOut.model_validate(current),
            patient_history=build_patient_history(current, others),
        )

    # ---- Update ----

    async def update_booking(self, booking_id: uuid.UUID, payload: BookingUpdate) -> Booking:
        data = payload.model_dump(exclude_unset=True)
        errors = {}
        changes: dict = {}
        if "name" in data:
            if not _clean(data["name"]):
                errors["name"] = "must not be empty"
            changes["customer_name"] = _clean(data["name"])
        if "phone" in data:
            if not _clean(data["phone"]):
                errors["phone"] = "must not be empty"
            changes["customer_phone"] = _clean(data["phone"])
        if "date" in data:
            if data["date"] is None:
                errors["date"] = "must not be empty"
            changes["appointment_date"] = ensure_clinic_tz(data["date"])
        if data.get("amount_paid") is not None:
            changes["amount_paid"] = data["amount_paid"]
        if data.get("visit_type") is not None:
            changes["visit_type"] = data["visit_type"].value
        if errors:
            raise ValidationError.for_fields(errors)

        await self._get_or_404(booking_id)
        changes["updated_at"] = _now()
        obj = await self.bookings.update(booking_id, **changes)
        await commit_or_raise(self.session)
        return obj

    async def set_status(self, booking_id: uuid.UUID, new_status: str) -> Booking:
        target = parse_status(new_status)
        obj = await self._get_or_404(booking_id)
        before = obj.status
        check_transition(before, target)
        obj = await self.bookings.update(booking_id, status=target.value, updated_at=_now())
        await commit_or_raise(self.session)
        logger.info(f"Booking {booking_id} status {before} -> {target.value}")
        return obj

    async def set_examination_status(self, principal: Principal | None, booking_id: uuid.UUID,
                                     new_status: str) -> Booking:
        ensure_any_permission(principal, BOOKING_PERMISSIONS, "change the examination status")
        target = parse_examination_status(new_status)
        await self._get_or_404(booking_id)
        obj = await self.bookings.update(booking_id, examination_status=target.value, updated_at=_now())
        await commit_or_raise(self.session)
        logger.info(f"Booking {booking_id} examination status -> {target.value} by {principal.staff_id}")
        return obj

    # ---- Delete ----

    async def cancel_booking(self, booking_id: uuid.UUID, *, confirmed: bool) -> None:
        """Remove the booking row for good. Use set_status(..., 'cancelled') for a reversible cancel."""
        if not confirmed:
            raise ValidationError(
                "Deleting a booking cannot be undone; repeat the request with confirm=true",
                {"confirm": "required"},
            )
        await self._get_or_404(booking_id)
        await self.bookings.delete(booking_id)
        await commit_or_raise(self.session)
        logger.info(f"Booking {booking_id} deleted")
