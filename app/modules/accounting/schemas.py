import uuid
from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field

# ---- Inputs ----

class IncomeCreate(BaseModel):
    description: str = ""
    amount: Decimal = Field(..., max_digits=10, decimal_places=2)  # Numeric(10, 2)
    entry_date: date | None = None

class ExpenseCreate(BaseModel):
    description: str = ""
    amount: Decimal = Field(..., max_digits=10, decimal_places=2)  # Numeric(10, 2)
    expense_date: date | None = None
    notes: str | None = None

# ---- Outputs ----

class IncomeEntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    description: str
    amount: Decimal
    entry_date: date
    created_at: datetime

class ExpenseEntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    description: str
    amount: Decimal
    expense_date: date
    notes: str | None = None
    created_at: datetime

class CustomerIncome(BaseModel):
    customer_name: str
    amount: Decimal

class BookingsIncomeResponse(BaseModel):
    month: str
    by_customer: list[CustomerIncome]
    total: Decimal

class ManualIncomeResponse(BaseModel):
    month: str
    entries: list[IncomeEntryOut]
    total: Decimal

class ExpensesResponse(BaseModel):
    month: str
    expenses: list[ExpenseEntryOut]
    total: Decimal

class AccountsSummaryResponse(BaseModel):
    month: str
    income_from_bookings: Decimal
    manual_income: Decimal
    total_income: Decimal
    total_expenses: Decimal
    balance: Decimal
