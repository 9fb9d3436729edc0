# complaints/user/schemas.py
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from complaints.user.models import Role


class UserBrief(BaseModel):
    id: int
    name: str
    email: str
    role: Role
    department: str | None = None

    model_config = {"from_attributes": True}


class UserOut(UserBrief):
    identification: str | None = None
    created_at: datetime


class UserWithCounts(UserOut):
    authored_ticket_count: int = 0
    assigned_ticket_count: int = 0


class RegisterIn(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    identification: str | None = None
    department: str | None = None


class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class AuthOut(BaseModel):
    user: UserOut
    token: str


class UserRoleUpdate(BaseModel):
    role: str
    department: str | None = None
