from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Boolean, JSON
from app.core.base import Base, TimestampedMixin

class StaffMember(Base, TimestampedMixin):
    name: Mapped[str] = mapped_column(String(120))
    email: Mapped[str] = mapped_column(String(320), unique=True)
    password_hash: Mapped[str] = mapped_column(String(128))
    role: Mapped[str] = mapped_column(String(16), default="staff")  # admin, staff
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    # unrestricted access is this explicit flag, never an empty permission list
    is_full_admin: Mapped[bool] = mapped_column(Boolean, default=False)
    permissions: Mapped[list] = mapped_column(JSON, default=list)  # ["manage_online_bookings", ...]
