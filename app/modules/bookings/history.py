from decimal import Decimal
from typing import Iterable

from app.modules.bookings.models import Booking
from app.modules.bookings.schemas import BookingOut, LastVisit, PatientHistory


def _amount(b: Booking) -> Decimal:
    return Decimal(b.amount_paid or 0)


def build_patient_history(current: Booking, others: Iterable[Booking]) -> PatientHistory:
    """
    Summarise a customer's other visits as seen from one booking.

    `others` are bookings sharing the current booking's phone number; the
    current booking is dropped if present. Past visits are counted without
    it, while the amount paid includes it.
    """
    past = [b for b in others if b.id != current.id]
    past.sort(key=lambda b: b.appointment_date, reverse=True)

    last_visit = None
    if past:
        head = past[0]
        last_visit = LastVisit(
            date=head.appointment_date,
            visit_type=head.visit_type,
            amount_paid=_amount(head),
            status=head.status,
        )

    return PatientHistory(
        total_past_visits=len(past),
        total_amount_paid=sum((_amount(b) for b in past), _amount(current)),
        last_visit=last_visit,
        past_bookings=[BookingOut.model_validate(b) for b in past],
    )
