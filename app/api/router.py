from fastapi import APIRouter
from app.modules.bookings.router import router as bookings_router
from app.modules.reports.router import router as reports_router
from app.modules.accounting.router import router as accounting_router
from app.modules.staff.router import auth_router, router as staff_router

api_router = APIRouter()
api_router.include_router(bookings_router, prefix="/bookings", tags=["bookings"])
# reports hang off a booking: /bookings/{id}/report
api_router.include_router(reports_router, prefix="/bookings", tags=["reports"])
api_router.include_router(accounting_router, prefix="/accounts", tags=["accounts"])
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(staff_router, prefix="/admin/staff", tags=["staff"])

@api_router.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}
