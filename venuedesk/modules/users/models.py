from pydantic import BaseModel, ConfigDict, Field, EmailStr
from typing import Optional, Dict
from datetime import datetime, timezone
from enum import Enum
import uuid


class UserRole(str, Enum):
    admin = "admin"
    manager = "manager"
    salesperson = "salesperson"
    accounts = "accounts"
    staff = "staff"

class UserStatus(str, Enum):
    active = "active"
    inactive = "inactive"

class User(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    role: UserRole = UserRole.salesperson
    first_name: str
    last_name: Optional[str] = None
    email: EmailStr
    phone: Optional[str] = None
    hashed_password: str
    status: UserStatus = UserStatus.active
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

class Role(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: UserRole
    display_name: str
    description: Optional[str] = None
    permissions: Dict[str, Dict[str, bool]] = {}
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# Used when the roles collection has no document for a role
DEFAULT_ROLE_PERMISSIONS: Dict[UserRole, Dict[str, Dict[str, bool]]] = {
    UserRole.admin: {
        "enquiries": {"create": True, "read": True, "update": True, "delete": True},
        "bookings": {"create": True, "read": True, "update": True, "delete": True},
        "reports": {"view": True},
        "settings": {"manage": True},
        "audit": {"view": True},
        "users": {"create": True, "read": True, "update": True, "delete": True},
    },
    UserRole.manager: {
        "enquiries": {"create": True, "read": True, "update": True, "delete": False},
        "bookings": {"create": False, "read": True, "update": True, "delete": False},
        "reports": {"view": True},
        "settings": {"manage": False},
        "audit": {"view": True},
        "users": {"create": False, "read": True, "update": False, "delete": False},
    },
    UserRole.salesperson: {
        "enquiries": {"create": True, "read": True, "update": True, "delete": False},
        "bookings": {"create": True, "read": True, "update": True, "delete": False},
        "reports": {"view": True},
        "settings": {"manage": False},
        "audit": {"view": False},
        "users": {"create": False, "read": False, "update": False, "delete": False},
    },
    UserRole.accounts: {
        "enquiries": {"create": False, "read": True, "update": False, "delete": False},
        "bookings": {"create": False, "read": True, "update": True, "delete": False},
        "reports": {"view": True},
        "settings": {"manage": False},
        "audit": {"view": False},
        "users": {"create": False, "read": False, "update": False, "delete": False},
    },
    UserRole.staff: {
        "enquiries": {"create": True, "read": False, "update": False, "delete": False},
        "bookings": {"create": False, "read": False, "update": False, "delete": False},
        "reports": {"view": False},
        "settings": {"manage": False},
        "audit": {"view": False},
        "users": {"create": False, "read": False, "update": False, "delete": False},
    },
}

ROLE_DISPLAY_NAMES = {
    UserRole.admin: "Admin",
    UserRole.manager: "Manager",
    UserRole.salesperson: "Salesperson",
    UserRole.accounts: "Accounts",
    UserRole.staff: "Staff",
}
