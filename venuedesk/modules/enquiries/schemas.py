from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List, Dict, Any
from datetime import datetime
from venuedesk.modules.bookings.models import EventSession
from venuedesk.modules.enquiries.models import EnquiryStatus


class EnquiryCreate(BaseModel):
    client_name: str = Field(min_length=1)
    contact_number: str = Field(min_length=5)
    email: Optional[EmailStr] = None
    city: Optional[str] = None
    event_type: str
    event_date: datetime
    event_end_date: Optional[datetime] = None
    expected_pax: int = Field(ge=1)
    number_of_rooms: int = Field(default=0, ge=0)
    source: str = "walk_in"
    salesperson_id: Optional[str] = None
    follow_up_date: Optional[datetime] = None
    notes: Optional[str] = None
    sessions: List[EventSession] = []

class EnquiryUpdate(BaseModel):
    client_name: Optional[str] = Field(default=None, min_length=1)
    contact_number: Optional[str] = Field(default=None, min_length=5)
    email: Optional[EmailStr] = None
    city: Optional[str] = None
    event_type: Optional[str] = None
    event_date: Optional[datetime] = None
    event_end_date: Optional[datetime] = None
    expected_pax: Optional[int] = Field(default=None, ge=1)
    number_of_rooms: Optional[int] = Field(default=None, ge=0)
    source: Optional[str] = None
    status: Optional[EnquiryStatus] = None
    lost_reason: Optional[str] = None
    follow_up_date: Optional[datetime] = None
    notes: Optional[str] = None
    sessions: Optional[List[EventSession]] = None

class PublicEnquiryCreate(BaseModel):
    client_name: str = Field(min_length=1)
    contact_number: str = Field(min_length=5)
    email: Optional[EmailStr] = None
    city: Optional[str] = None
    event_type: str
    event_date: datetime
    expected_pax: int = Field(ge=1)
    notes: Optional[str] = None

class PublicEnquiryStatus(BaseModel):
    enquiry_number: str
    client_name: str
    event_type: str
    event_date: datetime
    status: EnquiryStatus
    created_at: datetime

class EnquiryPage(BaseModel):
    data: List[Dict[str, Any]]
    total: int
    page: int
    page_size: int

class FollowUpCreate(BaseModel):
    follow_up_date: datetime
    follow_up_time: Optional[str] = Field(default=None, pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    notes: Optional[str] = None

class FollowUpComplete(BaseModel):
    notes: Optional[str] = None

class PhoneLookup(BaseModel):
    found: bool
    client_name: Optional[str] = None
    email: Optional[str] = None
    city: Optional[str] = None
    contact_number: Optional[str] = None
