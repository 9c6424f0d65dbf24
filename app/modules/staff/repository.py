import uuid
from typing import Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from app.modules.staff.models import StaffMember

class StaffRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **data) -> StaffMember:
        obj = StaffMember(**data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, staff_id: uuid.UUID) -> StaffMember | None:
        res = await self.session.execute(select(StaffMember).where(StaffMember.id == staff_id))
        return res.scalar_one_or_none()

    async def get_by_email(self, email: str) -> StaffMember | None:
        res = await self.session.execute(select(StaffMember).where(StaffMember.email == email.strip().lower()))
        return res.scalar_one_or_none()

    async def list(self) -> Sequence[StaffMember]:
        res = await self.session.execute(select(StaffMember).order_by(StaffMember.created_at.asc()))
        return res.scalars().all()

    async def update(self, staff_id: uuid.UUID, **data) -> StaffMember | None:
        obj = await self.get(staff_id)
        if not obj:
            return None
        for k, v in data.items():
            setattr(obj, k, v)
        await self.session.flush()
        return obj

    async def delete(self, staff_id: uuid.UUID) -> bool:
        res = await self.session.execute(delete(StaffMember).where(StaffMember.id == staff_id))
        return res.rowcount > 0
