import uuid
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

class MedicationIn(BaseModel):
    medication_name: str = ""
    dosage: str = ""
    frequency: str | None = None
    notes: str | None = None

class ReportWrite(BaseModel):
    medical_condition: str = ""
    notes: str | None = None
    medications: list[MedicationIn] = Field(default_factory=list)

class MedicationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    report_id: uuid.UUID
    medication_name: str
    dosage: str
    frequency: str | None = None
    notes: str | None = None

class ReportOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    booking_id: uuid.UUID
    medical_condition: str
    notes: str | None = None
    medications: list[MedicationOut] = []
    created_at: datetime
    updated_at: datetime
