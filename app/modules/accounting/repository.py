from datetime import date
from decimal import Decimal
from typing import Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.modules.accounting.models import IncomeEntry, ExpenseEntry

class LedgerRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add_income(self, description: str, amount: Decimal, entry_date: date) -> IncomeEntry:
        obj = IncomeEntry(description=description, amount=amount, entry_date=entry_date)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def add_expense(self, description: str, amount: Decimal, expense_date: date, notes: str | None) -> ExpenseEntry:
        obj = ExpenseEntry(description=description, amount=amount, expense_date=expense_date, notes=notes)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def income_between(self, first: date, end: date) -> Sequence[IncomeEntry]:
        q = select(IncomeEntry).where(
            IncomeEntry.entry_date >= first, IncomeEntry.entry_date < end
        ).order_by(IncomeEntry.entry_date.desc(), IncomeEntry.created_at.desc())
        res = await self.session.execute(q)
        return res.scalars().all()

    async def expenses_between(self, first: date, end: date) -> Sequence[ExpenseEntry]:
        q = select(ExpenseEntry).where(
            ExpenseEntry.expense_date >= first, ExpenseEntry.expense_date < end
        ).order_by(ExpenseEntry.expense_date.desc(), ExpenseEntry.created_at.desc())
        res = await self.session.execute(q)
        return res.scalars().all()
