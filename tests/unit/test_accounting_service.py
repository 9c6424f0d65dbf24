"""
Tests for AccountingService on in-memory repositories.
"""

import pydantic
import pytest
from datetime import date, datetime, timezone
from decimal import Decimal

from app.core.errors import AuthorizationError, ValidationError
from app.modules.accounting.schemas import ExpenseCreate, IncomeCreate
from tests.fakes import make_booking


@pytest.fixture
def march(booking_repo, ledger_repo):
    for amount, day in (("100", 4), ("200", 18)):
        b = make_booking(amount_paid=Decimal(amount), appointment_date=datetime(2024, 3, day, 11, 0, tzinfo=timezone.utc))
        booking_repo.rows[b.id] = b
    # outside the month
    b = make_booking(amount_paid=Decimal("5000"), appointment_date=datetime(2024, 4, 1, 0, 0, tzinfo=timezone.utc))
    booking_repo.rows[b.id] = b


class TestAccountingService:

    async def test_summary(self, accounting_service, bookkeeper, march, session):
        await accounting_service.add_income(bookkeeper, IncomeCreate(description="x", amount=Decimal("50"), entry_date=date(2024, 3, 3)))
        await accounting_service.add_expense(bookkeeper, ExpenseCreate(description="y", amount=Decimal("30"), expense_date=date(2024, 3, 10)))

        summary = await accounting_service.summary("2024-03")

        assert summary.income_from_bookings == Decimal("300")
        assert summary.manual_income == Decimal("50")
        assert summary.total_income == Decimal("350")
        assert summary.total_expenses == Decimal("30")
        assert summary.balance == Decimal("320")
        session.connection.assert_awaited()

    async def test_income_needs_description(self, accounting_service, bookkeeper, session):
        with pytest.raises(ValidationError):
            await accounting_service.add_income(bookkeeper, IncomeCreate(description="", amount=Decimal("10")))
        session.commit.assert_not_awaited()

    async def test_income_needs_positive_amount(self, accounting_service, bookkeeper):
        with pytest.raises(ValidationError):
            await accounting_service.add_income(bookkeeper, IncomeCreate(description="x", amount=Decimal("0")))

    async def test_expense_needs_positive_amount(self, accounting_service, bookkeeper):
        with pytest.raises(ValidationError):
            await accounting_service.add_expense(bookkeeper, ExpenseCreate(description="x", amount=Decimal("-1")))

    async def test_entry_date_defaults_to_clinic_today(self, accounting_service, bookkeeper, monkeypatch):
        monkeypatch.setattr("app.modules.accounting.service.clinic_today", lambda: date(2024, 3, 9))

        obj = await accounting_service.add_income(bookkeeper, IncomeCreate(description="  tip ", amount=Decimal("5")))

        assert obj.entry_date == date(2024, 3, 9)
        assert obj.description == "tip"

    async def test_bookings_income_by_customer(self, accounting_service, booking_repo):
        for name, amount in (("Ann", "40"), ("Ann", "60"), ("Bob", "70")):
            b = make_booking(customer_name=name, amount_paid=Decimal(amount),
                             appointment_date=datetime(2024, 3, 2, tzinfo=timezone.utc))
            booking_repo.rows[b.id] = b

        result = await accounting_service.bookings_income("2024-03")

        assert [(c.customer_name, c.amount) for c in result.by_customer] == [
            ("Ann", Decimal("100")), ("Bob", Decimal("70")),
        ]

    async def test_expense_notes_blank_to_none(self, accounting_service, bookkeeper):
        obj = await accounting_service.add_expense(
            bookkeeper, ExpenseCreate(description="rent", amount=Decimal("10"), expense_date=date(2024, 3, 1), notes="  "),
        )
        assert obj.notes is None

        result = await accounting_service.expenses("2024-03")
        assert result.total == Decimal("10")

    async def test_bad_month(self, accounting_service):
        with pytest.raises(ValidationError):
            await accounting_service.summary("03-2024")

    async def test_writes_recheck_manage_accounts(self, accounting_service, desk, session):
        with pytest.raises(AuthorizationError):
            await accounting_service.add_income(desk, IncomeCreate(description="x", amount=Decimal("10")))
        with pytest.raises(AuthorizationError):
            await accounting_service.add_expense(None, ExpenseCreate(description="x", amount=Decimal("10")))
        session.commit.assert_not_awaited()


class TestAmountPrecision:
    """Amounts must fit the Numeric(10, 2) columns."""

    @pytest.mark.parametrize("amount", ["123456789012.345", "100000000", "10.005"])
    def test_out_of_range_amounts_are_rejected(self, amount):
        with pytest.raises(pydantic.ValidationError):
            IncomeCreate(description="x", amount=Decimal(amount))
        with pytest.raises(pydantic.ValidationError):
            ExpenseCreate(description="x", amount=Decimal(amount))

    def test_largest_storable_amount_is_accepted(self):
        assert IncomeCreate(description="x", amount=Decimal("99999999.99")).amount == Decimal("99999999.99")
