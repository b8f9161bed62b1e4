from pydantic import BaseModel, ConfigDict, Field, EmailStr
from typing import Optional, Dict
from venuedesk.modules.users.models import UserRole, UserStatus


class UserResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str
    role: UserRole
    first_name: str
    last_name: Optional[str] = None
    email: EmailStr
    phone: Optional[str] = None
    status: UserStatus = UserStatus.active

class CurrentUserResponse(UserResponse):
    permissions: Dict[str, Dict[str, bool]] = {}

class UserCreate(BaseModel):
    first_name: str = Field(min_length=1)
    last_name: Optional[str] = None
    email: EmailStr
    password: str = Field(min_length=8)
    phone: Optional[str] = None
    role: UserRole  # No default - must be explicitly provided

class UserUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    status: Optional[UserStatus] = None

class RoleUpdate(BaseModel):
    role: UserRole

class UserLogin(BaseModel):
    email: EmailStr
    password: str
