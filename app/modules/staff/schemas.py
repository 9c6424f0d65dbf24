import uuid
from datetime import datetime
from typing import Any
from pydantic import BaseModel, ConfigDict, EmailStr, Field

# permissions arrive as ["manage_accounts"] or [{"name": "manage_accounts"}];
# the service normalises them before anything else looks at them

class StaffCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    password: str = ""
    role: str = Field(default="staff", pattern="^(admin|staff)$")
    is_full_admin: bool = False
    permissions: list[Any] = Field(default_factory=list)

class StaffUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    password: str | None = None
    role: str | None = Field(default=None, pattern="^(admin|staff)$")
    is_full_admin: bool | None = None
    permissions: list[Any] | None = None

class StaffStatusChange(BaseModel):
    is_active: bool

class StaffOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    email: str
    role: str
    is_active: bool
    is_full_admin: bool
    permissions: list[str]
    created_at: datetime
    updated_at: datetime

# ---- Auth ----

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class LoginResponse(BaseModel):
    token: str
    expires_at: datetime
    id: uuid.UUID
    name: str
    email: str
    role: str
    is_full_admin: bool
    permissions: list[str]

class MeOut(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    is_full_admin: bool
    permissions: list[str]
