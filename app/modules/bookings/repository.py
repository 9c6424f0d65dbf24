import uuid
from datetime import datetime
from typing import Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, and_
from app.modules.bookings.models import Booking

class BookingRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **data) -> Booking:
        obj = Booking(report=None, **data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, booking_id: uuid.UUID) -> Booking | None:
        q = select(Booking).where(Booking.id == booking_id)
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def list(self, *, booking_type: str | None = None, status: str | None = None,
                   start: datetime | None = None, end: datetime | None = None,
                   newest_first: bool = False) -> Sequence[Booking]:
        cond = []
        if booking_type:
            cond.append(Booking.booking_type == booking_type)
        if status:
            cond.append(Booking.status == status)
        if start is not None:
            cond.append(Booking.appointment_date >= start)
        if end is not None:
            cond.append(Booking.appointment_date < end)
        order = Booking.appointment_date.desc() if newest_first else Booking.appointment_date.asc()
        q = select(Booking).where(and_(*cond)).order_by(order, Booking.created_at.asc())
        res = await self.session.execute(q)
        return res.scalars().all()

    async def list_by_phone(self, phone: str, *, exclude_id: uuid.UUID | None = None) -> Sequence[Booking]:
        cond = [Booking.customer_phone == phone]
        if exclude_id is not None:
            cond.append(Booking.id != exclude_id)
        q = select(Booking).where(and_(*cond)).order_by(Booking.appointment_date.desc())
        res = await self.session.execute(q)
        return res.scalars().all()

    async def list_in_range(self, start: datetime, end: datetime) -> Sequence[Booking]:
        q = select(Booking).where(
            Booking.appointment_date >= start,
            Booking.appointment_date < end,
        )
        res = await self.session.execute(q)
        return res.scalars().all()

    async def update(self, booking_id: uuid.UUID, **data) -> Booking | None:
        obj = await self.get(booking_id)
        if not obj:
            return None
        for k, v in data.items():
            setattr(obj, k, v)
        await self.session.flush()
        return obj

    async def delete(self, booking_id: uuid.UUID) -> bool:
        res = await self.session.execute(delete(Booking).where(Booking.id == booking_id))
        return res.rowcount > 0
