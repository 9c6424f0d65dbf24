import uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text, ForeignKey, Integer
from app.core.base import Base, TimestampedMixin

class PatientReport(Base, TimestampedMixin):
    booking_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("booking.id", ondelete="CASCADE"), unique=True)
    medical_condition: Mapped[str] = mapped_column(Text)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    booking = relationship("Booking", back_populates="report")
    medications = relationship(
        "Medication", back_populates="report", order_by="Medication.position",
        cascade="all, delete-orphan", passive_deletes=True, lazy="selectin",
    )

class Medication(Base, TimestampedMixin):
    report_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("patient_report.id", ondelete="CASCADE"))
    position: Mapped[int] = mapped_column(Integer, default=0)
    medication_name: Mapped[str] = mapped_column(String(200), default="")
    dosage: Mapped[str] = mapped_column(String(120), default="")
    frequency: Mapped[str | None] = mapped_column(String(120), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    report = relationship("PatientReport", back_populates="medications")
