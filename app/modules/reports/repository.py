import uuid
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.modules.reports.models import PatientReport, Medication

class ReportRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_for_booking(self, booking_id: uuid.UUID) -> PatientReport | None:
        q = select(PatientReport).where(PatientReport.booking_id == booking_id)
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def create(self, booking_id: uuid.UUID, medical_condition: str, notes: str | None,
                     medications: list[dict]) -> PatientReport:
        obj = PatientReport(
            booking_id=booking_id,
            medical_condition=medical_condition,
            notes=notes,
            medications=[Medication(position=i, **m) for i, m in enumerate(medications)],
        )
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def replace(self, report: PatientReport, medical_condition: str, notes: str | None,
                      medications: list[dict]) -> PatientReport:
        report.medical_condition = medical_condition
        report.notes = notes
        # delete-orphan drops the old rows
        report.medications = [Medication(position=i, **m) for i, m in enumerate(medications)]
        await self.session.flush()
        return report
