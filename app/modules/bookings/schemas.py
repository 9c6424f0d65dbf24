import uuid
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, EmailStr, Field, computed_field

from app.modules.bookings.lifecycle import BookingStatus, VisitType, examination_label
from app.modules.reports.schemas import ReportOut

# ---- Inputs ----
# Required fields are optional here so missing ones get one combined message from the service.

class OnlineBookingCreate(BaseModel):
    name: str | None = None
    phone: str | None = None
    date: datetime | None = None
    email: EmailStr | None = None
    amount: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)

class ClinicBookingCreate(BaseModel):
    name: str | None = None
    phone: str | None = None
    date: datetime | None = None
    amount_paid: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    visit_type: VisitType = VisitType.CHECKUP
    status: BookingStatus = BookingStatus.CONFIRMED

class BookingUpdate(BaseModel):
    name: str | None = None
    phone: str | None = None
    date: datetime | None = None
    amount_paid: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    visit_type: VisitType | None = None

class BookingStatusChange(BaseModel):
    status: str

class ExaminationStatusChange(BaseModel):
    examination_status: str

# ---- Outputs ----

class BookingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    customer_name: str
    customer_phone: str
    email: str | None = None
    appointment_date: datetime
    booking_type: str
    visit_type: str | None = None
    amount_paid: Decimal
    status: str
    examination_status: str | None = None
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def examination_label(self) -> str:
        return examination_label(self.examination_status)

class BookingDetailOut(BookingOut):
    report: ReportOut | None = None

class OnlineBookingCreated(BaseModel):
    message: str = "Booking request submitted successfully."
    booking: BookingOut

# ---- Patient history ----

class LastVisit(BaseModel):
    date: datetime
    visit_type: str | None = None
    amount_paid: Decimal
    status: str

class PatientHistory(BaseModel):
    total_past_visits: int
    total_amount_paid: Decimal
    last_visit: LastVisit | None = None
    past_bookings: list[BookingOut] = []

class BookingHistoryOut(BaseModel):
    current_booking: BookingDetailOut
    patient_history: PatientHistory
