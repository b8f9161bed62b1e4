from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict
from datetime import datetime, timezone, timedelta
from enum import Enum
import uuid
from venuedesk.core.config import QUOTATION_VALIDITY_DAYS


class QuotationStatus(str, Enum):
    draft = "draft"
    sent = "sent"
    accepted = "accepted"
    rejected = "rejected"
    expired = "expired"

STATUS_FLOW: Dict[QuotationStatus, List[QuotationStatus]] = {
    QuotationStatus.draft: [QuotationStatus.sent],
    QuotationStatus.sent: [QuotationStatus.accepted, QuotationStatus.rejected, QuotationStatus.expired],
    QuotationStatus.accepted: [],
    QuotationStatus.rejected: [],
    QuotationStatus.expired: [],
}

# Timestamp field stamped when a quotation enters the status
STATUS_TIMESTAMPS = {
    QuotationStatus.sent: "sent_at",
    QuotationStatus.accepted: "accepted_at",
    QuotationStatus.rejected: "rejected_at",
    QuotationStatus.expired: "expired_at",
}

class DiscountType(str, Enum):
    percentage = "percentage"
    fixed = "fixed"

class VenueRentalItem(BaseModel):
    model_config = ConfigDict(extra="ignore")
    event_date: Optional[str] = None
    venue: str
    venue_space: Optional[str] = None
    session: str
    session_rate: float = Field(ge=0)

class RoomPackage(BaseModel):
    model_config = ConfigDict(extra="ignore")
    event_date: Optional[str] = None
    category: str
    rate: float = Field(ge=0)
    number_of_rooms: Optional[int] = Field(default=None, ge=1)
    total_occupancy: Optional[int] = Field(default=None, ge=1)
    default_occupancy: Optional[int] = None
    max_occupancy: Optional[int] = None
    extra_person_rate: Optional[float] = None

class MenuSelectedItem(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: Optional[str] = None
    name: str
    price: float = 0
    additional_price: float = 0
    is_package_item: bool = True
    quantity: int = 1

class MenuPackageSelection(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: Optional[str] = None
    name: str
    type: str = "non-veg"
    price: float = 0
    selected_items: List[MenuSelectedItem] = []

class Quotation(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    quotation_number: str
    enquiry_id: str
    enquiry_number: Optional[str] = None
    version: int = 1
    parent_quotation_id: Optional[str] = None
    client_name: str
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    event_type: Optional[str] = None
    event_date: Optional[datetime] = None
    expected_guests: Optional[int] = None
    venue_rental_items: List[VenueRentalItem] = []
    room_packages: List[RoomPackage] = []
    menu_packages: List[MenuPackageSelection] = []
    include_gst: bool = False
    discount_type: Optional[DiscountType] = None
    discount_value: float = 0
    discount_reason: Optional[str] = None
    discount_exceeds_limit: bool = False
    totals: Dict[str, float] = {}
    grand_total: float = 0
    terms_and_conditions: Optional[str] = None
    valid_until: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc) + timedelta(days=QUOTATION_VALIDITY_DAYS)
    )
    status: QuotationStatus = QuotationStatus.draft
    sent_at: Optional[datetime] = None
    accepted_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    expired_at: Optional[datetime] = None
    created_by: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

class QuotationPackage(BaseModel):
    """Reusable quotation template."""
    model_config = ConfigDict(extra="ignore")
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    description: Optional[str] = None
    venue_rental_items: List[VenueRentalItem] = []
    room_packages: List[RoomPackage] = []
    menu_packages: List[MenuPackageSelection] = []
    include_gst: bool = False
    default_discount_type: Optional[DiscountType] = None
    default_discount_value: float = 0
    check_in_time: str = "14:00"
    check_out_time: str = "11:00"
    is_active: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
