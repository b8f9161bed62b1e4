from pydantic import BaseModel, Field, model_validator
from typing import Optional


class VenueCreate(BaseModel):
    name: str = Field(min_length=1)
    area: float = Field(gt=0)
    min_guests: int = Field(ge=1)
    max_guests: Optional[int] = Field(default=None, ge=1)
    hiring_charges: float = Field(gt=0)
    currency: str = "INR"
    description: Optional[str] = None

    @model_validator(mode="after")
    def check_guest_range(self):
        if self.max_guests is not None and self.max_guests < self.min_guests:
            raise ValueError("Maximum guests cannot be less than minimum guests")
        return self

class VenueUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    area: Optional[float] = Field(default=None, gt=0)
    min_guests: Optional[int] = Field(default=None, ge=1)
    max_guests: Optional[int] = Field(default=None, ge=1)
    hiring_charges: Optional[float] = Field(default=None, gt=0)
    currency: Optional[str] = None
    description: Optional[str] = None

class RoomTypeCreate(BaseModel):
    name: str = Field(min_length=1)
    base_rate: float = Field(gt=0)
    extra_person_rate: float = Field(default=0, ge=0)
    currency: str = "INR"
    max_occupancy: int = Field(default=2, ge=1)
    default_occupancy: int = Field(default=2, ge=1)
    description: Optional[str] = None

    @model_validator(mode="after")
    def check_occupancy(self):
        if self.default_occupancy > self.max_occupancy:
            raise ValueError("Default occupancy cannot exceed max occupancy")
        return self

class RoomTypeUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    base_rate: Optional[float] = Field(default=None, gt=0)
    extra_person_rate: Optional[float] = Field(default=None, ge=0)
    currency: Optional[str] = None
    max_occupancy: Optional[int] = Field(default=None, ge=1)
    default_occupancy: Optional[int] = Field(default=None, ge=1)
    description: Optional[str] = None
