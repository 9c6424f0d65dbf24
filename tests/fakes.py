"""
In-memory stand-ins for the repositories, the database session and the
Redis session store, so services and routes run without external services.

Rows are SimpleNamespace objects carrying the same attributes as the ORM
models, which is all the services and response schemas look at.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock


def _now():
    return datetime.now(timezone.utc)


def make_row(**data) -> SimpleNamespace:
    now = _now()
    data.setdefault("id", uuid.uuid4())
    data.setdefault("created_at", now)
    data.setdefault("updated_at", now)
    return SimpleNamespace(**data)


def make_booking(**data) -> SimpleNamespace:
    data.setdefault("customer_name", "Jane Doe")
    data.setdefault("customer_phone", "0100000000")
    data.setdefault("email", None)
    data.setdefault("appointment_date", datetime(2024, 1, 5, 10, 0, tzinfo=timezone.utc))
    data.setdefault("booking_type", "clinic")
    data.setdefault("visit_type", "checkup")
    data.setdefault("amount_paid", Decimal("0"))
    data.setdefault("status", "confirmed")
    data.setdefault("examination_status", None)
    data.setdefault("report", None)
    return make_row(**data)


def fake_session() -> Mock:
    session = Mock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.connection = AsyncMock()
    return session


class FakeBookingRepository:
    def __init__(self, rows=None):
        self.rows = {r.id: r for r in (rows or [])}

    async def create(self, **data):
        obj = make_booking(**data)
        self.rows[obj.id] = obj
        return obj

    async def get(self, booking_id):
        return self.rows.get(booking_id)

    async def list(self, *, booking_type=None, status=None, start=None, end=None, newest_first=False):
        out = [
            b for b in self.rows.values()
            if (not booking_type or b.booking_type == booking_type)
            and (not status or b.status == status)
            and (start is None or b.appointment_date >= start)
            and (end is None or b.appointment_date < end)
        ]
        return sorted(out, key=lambda b: b.appointment_date, reverse=newest_first)

    async def list_by_phone(self, phone, *, exclude_id=None):
        out = [b for b in self.rows.values() if b.customer_phone == phone and b.id != exclude_id]
        return sorted(out, key=lambda b: b.appointment_date, reverse=True)

    async def list_in_range(self, start, end):
        return [b for b in self.rows.values() if start <= b.appointment_date < end]

    async def update(self, booking_id, **data):
        obj = self.rows.get(booking_id)
        if obj is None:
            return None
        for k, v in data.items():
            setattr(obj, k, v)
        return obj

    async def delete(self, booking_id):
        return self.rows.pop(booking_id, None) is not None


class FakeReportRepository:
    def __init__(self, bookings: FakeBookingRepository):
        self.bookings = bookings
        self.rows = {}

    def _medications(self, report_id, medications):
        return [make_row(report_id=report_id, position=i, **m) for i, m in enumerate(medications)]

    async def get_for_booking(self, booking_id):
        return self.rows.get(booking_id)

    async def create(self, booking_id, medical_condition, notes, medications):
        obj = make_row(booking_id=booking_id, medical_condition=medical_condition, notes=notes)
        obj.medications = self._medications(obj.id, medications)
        self.rows[booking_id] = obj
        self.bookings.rows[booking_id].report = obj
        return obj

    async def replace(self, report, medical_condition, notes, medications):
        report.medical_condition = medical_condition
        report.notes = notes
        report.medications = self._medications(report.id, medications)
        return report


class FakeLedgerRepository:
    def __init__(self):
        self.income = []
        self.spent = []

    async def add_income(self, description, amount, entry_date):
        obj = make_row(description=description, amount=amount, entry_date=entry_date)
        self.income.append(obj)
        return obj

    async def add_expense(self, description, amount, expense_date, notes):
        obj = make_row(description=description, amount=amount, expense_date=expense_date, notes=notes)
        self.spent.append(obj)
        return obj

    async def income_between(self, first, end):
        return [e for e in self.income if first <= e.entry_date < end]

    async def expenses_between(self, first, end):
        return [e for e in self.spent if first <= e.expense_date < end]


class FakeStaffRepository:
    def __init__(self):
        self.rows = {}

    async def create(self, **data):
        obj = make_row(**data)
        self.rows[obj.id] = obj
        return obj

    async def get(self, staff_id):
        return self.rows.get(staff_id)

    async def get_by_email(self, email):
        email = email.strip().lower()
        return next((s for s in self.rows.values() if s.email == email), None)

    async def list(self):
        return sorted(self.rows.values(), key=lambda s: s.created_at)

    async def update(self, staff_id, **data):
        obj = self.rows.get(staff_id)
        if obj is None:
            return None
        for k, v in data.items():
            setattr(obj, k, v)
        return obj

    async def delete(self, staff_id):
        return self.rows.pop(staff_id, None) is not None


class FakeSessionStore:
    """Same surface as RedisManager, kept in dicts."""

    def __init__(self):
        self.sessions: dict[str, dict] = {}
        self.by_staff: dict[str, set[str]] = {}

    async def set_session(self, session_id, staff_id, data):
        self.sessions[session_id] = data
        self.by_staff.setdefault(staff_id, set()).add(session_id)

    async def get_session(self, session_id):
        return self.sessions.get(session_id)

    async def delete_session(self, session_id):
        self.sessions.pop(session_id, None)

    async def revoke_staff_sessions(self, staff_id):
        ids = self.by_staff.pop(staff_id, set())
        for sid in ids:
            self.sessions.pop(sid, None)
        return len(ids)


def make_principal(*permissions, full_admin: bool = False, name: str = "Desk"):
    from app.core.security import FullAdmin, Principal, Restricted

    access = FullAdmin() if full_admin else Restricted(permissions=frozenset(permissions))
    return Principal(
        staff_id=uuid.uuid4(),
        session_id=uuid.uuid4().hex,
        name=name,
        email=f"{name.lower()}@clinic.example.com",
        access=access,
    )
