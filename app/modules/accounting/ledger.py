"""
Monthly ledger arithmetic.

Pure functions over already-fetched rows. Income from bookings and manual
entries are separate sources and are only added together here, at read time.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable

from app.core.clinic_time import month_dates, month_key
from app.core.errors import ValidationError
from app.modules.accounting.schemas import (
    AccountsSummaryResponse, BookingsIncomeResponse, CustomerIncome,
    ExpenseEntryOut, ExpensesResponse, IncomeEntryOut, ManualIncomeResponse,
)

ZERO = Decimal("0")


def validate_entry(description: str | None, amount: Decimal | None) -> str:
    errors = {}
    description = (description or "").strip()
    if not description:
        errors["description"] = "required"
    if amount is None or amount <= 0:
        errors["amount"] = "must be greater than zero"
    if errors:
        raise ValidationError.for_fields(errors)
    return description


def bookings_income(month: str, bookings: Iterable) -> BookingsIncomeResponse:
    by_customer: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for b in bookings:
        if month_key(b.appointment_date) != month:
            continue
        by_customer[b.customer_name] += Decimal(b.amount_paid or 0)
    rows = sorted(by_customer.items(), key=lambda kv: (-kv[1], kv[0]))
    return BookingsIncomeResponse(
        month=month,
        by_customer=[CustomerIncome(customer_name=name, amount=amount) for name, amount in rows],
        total=sum(by_customer.values(), ZERO),
    )


def _in_month(month: str, day) -> bool:
    first, nxt = month_dates(month)
    return first <= day < nxt


def manual_income(month: str, entries: Iterable) -> ManualIncomeResponse:
    rows = [e for e in entries if _in_month(month, e.entry_date)]
    rows.sort(key=lambda e: (e.entry_date, e.created_at), reverse=True)
    return ManualIncomeResponse(
        month=month,
        entries=[IncomeEntryOut.model_validate(e) for e in rows],
        total=sum((Decimal(e.amount) for e in rows), ZERO),
    )


def expenses(month: str, entries: Iterable) -> ExpensesResponse:
    rows = [e for e in entries if _in_month(month, e.expense_date)]
    rows.sort(key=lambda e: (e.expense_date, e.created_at), reverse=True)
    return ExpensesResponse(
        month=month,
        expenses=[ExpenseEntryOut.model_validate(e) for e in rows],
        total=sum((Decimal(e.amount) for e in rows), ZERO),
    )


def summarize(month: str, income: BookingsIncomeResponse, manual: ManualIncomeResponse,
              spent: ExpensesResponse) -> AccountsSummaryResponse:
    total_income = income.total + manual.total
    return AccountsSummaryResponse(
        month=month,
        income_from_bookings=income.total,
        manual_income=manual.total,
        total_income=total_income,
        total_expenses=spent.total,
        balance=total_income - spent.total,
    )
