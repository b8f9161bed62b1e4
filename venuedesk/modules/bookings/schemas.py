from pydantic import BaseModel, EmailStr, Field, model_validator
from typing import Optional, List, Dict, Any
from datetime import datetime
from venuedesk.modules.bookings.models import BookingStatus, EventSession
from venuedesk.modules.bookings.conflicts import TIME_PATTERN


class BookingCreate(BaseModel):
    enquiry_id: Optional[str] = None
    client_name: str = Field(min_length=1)
    contact_number: str = Field(min_length=5)
    email: Optional[EmailStr] = None
    event_type: str
    event_date: datetime
    event_end_date: Optional[datetime] = None
    event_start_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    event_end_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    confirmed_pax: int = Field(ge=1)
    number_of_rooms: int = Field(default=0, ge=0)
    hall: Optional[str] = None
    total_amount: float = Field(default=0, ge=0)
    advance_amount: float = Field(default=0, ge=0)
    contract_signed: bool = False
    notes: Optional[str] = None
    salesperson_id: Optional[str] = None
    sessions: List[EventSession] = Field(min_length=1)

    @model_validator(mode="after")
    def check_amounts(self):
        if self.advance_amount > self.total_amount:
            raise ValueError("Advance amount cannot exceed total amount")
        return self

class BookingUpdate(BaseModel):
    client_name: Optional[str] = Field(default=None, min_length=1)
    contact_number: Optional[str] = Field(default=None, min_length=5)
    email: Optional[EmailStr] = None
    event_type: Optional[str] = None
    event_date: Optional[datetime] = None
    event_end_date: Optional[datetime] = None
    confirmed_pax: Optional[int] = Field(default=None, ge=1)
    number_of_rooms: Optional[int] = Field(default=None, ge=0)
    total_amount: Optional[float] = Field(default=None, ge=0)
    advance_amount: Optional[float] = Field(default=None, ge=0)
    contract_signed: Optional[bool] = None
    status: Optional[BookingStatus] = None
    notes: Optional[str] = None
    sessions: Optional[List[EventSession]] = Field(default=None, min_length=1)

class BookingPage(BaseModel):
    data: List[Dict[str, Any]]
    total: int
    page: int
    page_size: int
