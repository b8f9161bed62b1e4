from pydantic import BaseModel, Field
from typing import Optional
from venuedesk.modules.menus.models import MenuType


class MenuPackageCreate(BaseModel):
    name: str = Field(min_length=1)
    type: MenuType
    price: float = Field(ge=0)
    description: Optional[str] = None

class MenuPackageUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    type: Optional[MenuType] = None
    price: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = None

class MenuItemCreate(BaseModel):
    package_id: str
    name: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)
    is_veg: bool = True

class MenuItemUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    quantity: Optional[int] = Field(default=None, ge=1)
    is_veg: Optional[bool] = None

class AdditionalItemCreate(BaseModel):
    name: str = Field(min_length=1)
    price: float = Field(ge=1)
    quantity: int = Field(default=1, ge=1)
    is_veg: bool = True
    is_active: bool = True
    description: Optional[str] = None

class AdditionalItemUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    price: Optional[float] = Field(default=None, ge=1)
    quantity: Optional[int] = Field(default=None, ge=1)
    is_veg: Optional[bool] = None
    is_active: Optional[bool] = None
    description: Optional[str] = None
