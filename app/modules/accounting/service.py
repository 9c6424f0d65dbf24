import logging
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clinic_time import clinic_today, month_bounds, month_dates
from app.core.db import commit_or_raise
from app.core.security import Permission, Principal, ensure_any_permission
from app.modules.accounting import ledger
from app.modules.accounting.models import ExpenseEntry, IncomeEntry
from app.modules.accounting.repository import LedgerRepository
from app.modules.accounting.schemas import (
    AccountsSummaryResponse, BookingsIncomeResponse, ExpenseCreate, ExpensesResponse,
    IncomeCreate, ManualIncomeResponse,
)
from app.modules.bookings.repository import BookingRepository

logger = logging.getLogger(__name__)

class AccountingService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.ledger = LedgerRepository(session)
        self.bookings = BookingRepository(session)

    async def _snapshot(self) -> None:
        # Every read that follows in this transaction sees one point in time.
        # Must run before the first statement of the transaction.
        await self.session.connection(execution_options={"isolation_level": "REPEATABLE READ"})

    # ---- Reads ----

    async def bookings_income(self, month: str) -> BookingsIncomeResponse:
        start, end = month_bounds(month)
        await self._snapshot()
        rows = await self.bookings.list_in_range(start, end)
        return ledger.bookings_income(month, rows)

    async def manual_income(self, month: str) -> ManualIncomeResponse:
        first, nxt = month_dates(month)
        await self._snapshot()
        return ledger.manual_income(month, await self.ledger.income_between(first, nxt))

    async def expenses(self, month: str) -> ExpensesResponse:
        first, nxt = month_dates(month)
        await self._snapshot()
        return ledger.expenses(month, await self.ledger.expenses_between(first, nxt))

    async def summary(self, month: str) -> AccountsSummaryResponse:
        start, end = month_bounds(month)
        first, nxt = month_dates(month)
        await self._snapshot()
        income = ledger.bookings_income(month, await self.bookings.list_in_range(start, end))
        manual = ledger.manual_income(month, await self.ledger.income_between(first, nxt))
        spent = ledger.expenses(month, await self.ledger.expenses_between(first, nxt))
        return ledger.summarize(month, income, manual, spent)

    # ---- Writes ----

    async def add_income(self, principal: Principal | None, payload: IncomeCreate) -> IncomeEntry:
        ensure_any_permission(principal, (Permission.MANAGE_ACCOUNTS,), "record income")
        description = ledger.validate_entry(payload.description, payload.amount)
        obj = await self.ledger.add_income(description, payload.amount, payload.entry_date or clinic_today())
        await commit_or_raise(self.session)
        logger.info(f"Manual income {obj.id} of {obj.amount} recorded for {obj.entry_date}")
        return obj

    async def add_expense(self, principal: Principal | None, payload: ExpenseCreate) -> ExpenseEntry:
        ensure_any_permission(principal, (Permission.MANAGE_ACCOUNTS,), "record expenses")
        description = ledger.validate_entry(payload.description, payload.amount)
        notes = (payload.notes or "").strip() or None
        obj = await self.ledger.add_expense(description, payload.amount, payload.expense_date or clinic_today(), notes)
        await commit_or_raise(self.session)
        logger.info(f"Expense {obj.id} of {obj.amount} recorded for {obj.expense_date}")
        return obj
