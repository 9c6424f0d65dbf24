from datetime import date
from decimal import Decimal
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, Numeric, Date, Index
from app.core.base import Base, TimestampedMixin

class IncomeEntry(Base, TimestampedMixin):
    # "other" income, not tied to a booking
    description: Mapped[str] = mapped_column(String(255))
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    entry_date: Mapped[date] = mapped_column(Date)

    __table_args__ = (Index("ix_income_entry_entry_date", "entry_date"),)

class ExpenseEntry(Base, TimestampedMixin):
    description: Mapped[str] = mapped_column(String(255))
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    expense_date: Mapped[date] = mapped_column(Date)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (Index("ix_expense_entry_expense_date", "expense_date"),)
