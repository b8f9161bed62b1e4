from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict
from datetime import datetime, timezone
from enum import Enum
import uuid
from venuedesk.modules.bookings.models import EventSession


class EnquiryStatus(str, Enum):
    new = "new"
    quotation_sent = "quotation_sent"
    ongoing = "ongoing"
    converted = "converted"
    booked = "booked"
    closed = "closed"
    lost = "lost"

# Allowed next states; closed and lost are terminal
STATUS_FLOW: Dict[EnquiryStatus, List[EnquiryStatus]] = {
    EnquiryStatus.new: [EnquiryStatus.quotation_sent, EnquiryStatus.lost],
    EnquiryStatus.quotation_sent: [EnquiryStatus.ongoing, EnquiryStatus.lost],
    EnquiryStatus.ongoing: [EnquiryStatus.converted, EnquiryStatus.lost],
    EnquiryStatus.converted: [EnquiryStatus.booked, EnquiryStatus.lost],
    EnquiryStatus.booked: [EnquiryStatus.closed],
    EnquiryStatus.closed: [],
    EnquiryStatus.lost: [],
}

# Enquiries in these states hold their venue against new enquiries
BLOCKING_ENQUIRY_STATUSES = [EnquiryStatus.converted.value]

class AssignmentStatus(str, Enum):
    unassigned = "unassigned"
    assigned = "assigned"

class StatusChange(BaseModel):
    from_status: Optional[EnquiryStatus] = None
    to_status: EnquiryStatus
    changed_by: Optional[str] = None
    note: Optional[str] = None
    changed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

class Enquiry(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    enquiry_number: str
    client_name: str
    contact_number: str
    email: Optional[str] = None
    city: Optional[str] = None
    event_type: str
    event_date: datetime
    event_end_date: Optional[datetime] = None
    expected_pax: int
    number_of_rooms: int = 0
    source: str = "walk_in"
    salesperson_id: Optional[str] = None
    created_by: Optional[str] = None
    assignment_status: AssignmentStatus = AssignmentStatus.assigned
    status: EnquiryStatus = EnquiryStatus.new
    lost_reason: Optional[str] = None
    follow_up_date: Optional[datetime] = None
    notes: Optional[str] = None
    sessions: List[EventSession] = []
    status_history: List[StatusChange] = []
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

class FollowUp(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    enquiry_id: str
    follow_up_date: datetime
    follow_up_time: Optional[str] = None
    notes: Optional[str] = None
    set_by_id: Optional[str] = None
    completed: bool = False
    completed_at: Optional[datetime] = None
    completed_by_id: Optional[str] = None
    completion_notes: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
