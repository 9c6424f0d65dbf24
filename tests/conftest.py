"""
Shared fixtures.

Unit tests run on the in-memory fakes in tests/fakes.py. Integration tests
under tests/integration need TEST_DATABASE_URL and skip themselves otherwise.
"""

import pytest

from app.core.security import Permission, Principal
from app.modules.accounting.service import AccountingService
from app.modules.bookings.service import BookingService
from app.modules.reports.service import ReportService
from app.modules.staff.service import StaffService
from tests.fakes import (
    FakeBookingRepository, FakeLedgerRepository, FakeReportRepository,
    FakeSessionStore, FakeStaffRepository, fake_session, make_principal,
)


@pytest.fixture
def admin() -> Principal:
    return make_principal(full_admin=True, name="Admin")


@pytest.fixture
def desk() -> Principal:
    return make_principal(Permission.MANAGE_DAILY_BOOKINGS, Permission.MANAGE_ONLINE_BOOKINGS)


@pytest.fixture
def bookkeeper() -> Principal:
    return make_principal(Permission.MANAGE_ACCOUNTS, name="Books")


@pytest.fixture
def session():
    return fake_session()


@pytest.fixture
def booking_repo() -> FakeBookingRepository:
    return FakeBookingRepository()


@pytest.fixture
def report_repo(booking_repo) -> FakeReportRepository:
    return FakeReportRepository(booking_repo)


@pytest.fixture
def ledger_repo() -> FakeLedgerRepository:
    return FakeLedgerRepository()


@pytest.fixture
def staff_repo() -> FakeStaffRepository:
    return FakeStaffRepository()


@pytest.fixture
def session_store() -> FakeSessionStore:
    return FakeSessionStore()


@pytest.fixture
def booking_service(session, booking_repo) -> BookingService:
    service = BookingService(session)
    service.bookings = booking_repo
    return service


@pytest.fixture
def report_service(session, booking_repo, report_repo) -> ReportService:
    service = ReportService(session)
    service.bookings = booking_repo
    service.reports = report_repo
    return service


@pytest.fixture
def accounting_service(session, booking_repo, ledger_repo) -> AccountingService:
    service = AccountingService(session)
    service.bookings = booking_repo
    service.ledger = ledger_repo
    return service


@pytest.fixture
def staff_service(session, staff_repo, session_store) -> StaffService:
    service = StaffService(session, session_store)
    service.staff = staff_repo
    return service
