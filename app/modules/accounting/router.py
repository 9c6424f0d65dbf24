from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clinic_time import clinic_today
from app.core.db import get_session
from app.core.security import Permission, Principal, require_permission
from app.modules.accounting.schemas import (
    AccountsSummaryResponse, BookingsIncomeResponse, ExpenseCreate, ExpenseEntryOut,
    ExpensesResponse, IncomeCreate, IncomeEntryOut, ManualIncomeResponse,
)
from app.modules.accounting.service import AccountingService

_manage_accounts = require_permission(Permission.MANAGE_ACCOUNTS)

router = APIRouter(dependencies=[Depends(_manage_accounts)])

def svc(session: AsyncSession = Depends(get_session)) -> AccountingService:
    return AccountingService(session)

def month_param(month: str | None = Query(default=None, description="YYYY-MM, defaults to the current month")) -> str:
    return month or clinic_today().strftime("%Y-%m")

@router.get("/summary", response_model=AccountsSummaryResponse)
async def accounts_summary(month: str = Depends(month_param), service: AccountingService = Depends(svc)):
    return await service.summary(month)

@router.get("/income/bookings", response_model=BookingsIncomeResponse)
async def bookings_income(month: str = Depends(month_param), service: AccountingService = Depends(svc)):
    return await service.bookings_income(month)

@router.get("/income/manual", response_model=ManualIncomeResponse)
async def manual_income(month: str = Depends(month_param), service: AccountingService = Depends(svc)):
    return await service.manual_income(month)

@router.get("/expenses", response_model=ExpensesResponse)
async def list_expenses(month: str = Depends(month_param), service: AccountingService = Depends(svc)):
    return await service.expenses(month)

@router.post("/income", response_model=IncomeEntryOut, status_code=status.HTTP_201_CREATED)
async def add_income(
    payload: IncomeCreate,
    principal: Principal = Depends(_manage_accounts),
    service: AccountingService = Depends(svc),
):
    return await service.add_income(principal, payload)

@router.post("/expenses", response_model=ExpenseEntryOut, status_code=status.HTTP_201_CREATED)
async def add_expense(
    payload: ExpenseCreate,
    principal: Principal = Depends(_manage_accounts),
    service: AccountingService = Depends(svc),
):
    return await service.add_expense(principal, payload)
