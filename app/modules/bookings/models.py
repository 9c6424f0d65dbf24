from datetime import datetime
from decimal import Decimal
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, TIMESTAMP, Numeric, Index
from app.core.base import Base, TimestampedMixin

class Booking(Base, TimestampedMixin):
    customer_name: Mapped[str] = mapped_column(String(200))
    customer_phone: Mapped[str] = mapped_column(String(32))  # identity key across visits
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)

    appointment_date: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True))
    booking_type: Mapped[str] = mapped_column(String(16), default="online")  # online, clinic
    visit_type: Mapped[str | None] = mapped_column(String(16), nullable=True)  # checkup, followup
    amount_paid: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))

    status: Mapped[str] = mapped_column(String(16), default="pending")  # pending, confirmed, cancelled, rejected
    examination_status: Mapped[str | None] = mapped_column(String(16), nullable=True)  # waiting, done; NULL = not set

    report = relationship(
        "PatientReport", back_populates="booking", uselist=False,
        cascade="all, delete-orphan", passive_deletes=True, lazy="selectin",
    )

    __table_args__ = (
        Index("ix_booking_customer_phone", "customer_phone"),
        Index("ix_booking_appointment_date", "appointment_date"),
    )

# PatientReport must be mapped before Booking.report is configured
from app.modules.reports import models as _report_models  # noqa: E402,F401
