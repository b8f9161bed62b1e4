from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime, timezone
from enum import Enum
import uuid


class BookingStatus(str, Enum):
    booked = "booked"
    pending_beo = "pending_beo"
    beo_ready = "beo_ready"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"
    closed = "closed"

# Bookings in these states no longer occupy their venue
INACTIVE_BOOKING_STATUSES = [BookingStatus.cancelled.value, BookingStatus.closed.value]

class EventSession(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    session_name: str
    session_label: Optional[str] = None
    venue: str
    start_time: str = Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    end_time: str = Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    session_date: datetime
    pax_count: int = Field(default=0, ge=0)
    special_instructions: Optional[str] = None

class Booking(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    booking_number: str
    enquiry_id: Optional[str] = None
    enquiry_number: Optional[str] = None
    client_name: str
    contact_number: str
    email: Optional[str] = None
    event_type: str
    event_date: datetime
    event_end_date: Optional[datetime] = None
    event_start_time: Optional[str] = None
    event_end_time: Optional[str] = None
    confirmed_pax: int
    number_of_rooms: int = 0
    hall: Optional[str] = None
    total_amount: float = 0
    advance_amount: float = 0
    balance_amount: float = 0
    contract_signed: bool = False
    status: BookingStatus = BookingStatus.booked
    notes: Optional[str] = None
    salesperson_id: Optional[str] = None
    created_by: Optional[str] = None
    sessions: List[EventSession] = []
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
