from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from datetime import datetime
from venuedesk.modules.quotations.models import (
    DiscountType, MenuPackageSelection, QuotationStatus, RoomPackage, VenueRentalItem,
)


class PricingInput(BaseModel):
    venue_rental_items: List[VenueRentalItem] = []
    room_packages: List[RoomPackage] = []
    menu_packages: List[MenuPackageSelection] = []
    include_gst: bool = False
    discount_type: Optional[DiscountType] = None
    discount_value: float = Field(default=0, ge=0)

    @model_validator(mode="after")
    def check_percentage(self):
        if self.discount_type == DiscountType.percentage and self.discount_value > 100:
            raise ValueError("Percentage discount cannot exceed 100")
        return self

class QuotationCreate(PricingInput):
    enquiry_id: str
    parent_quotation_id: Optional[str] = None
    client_name: Optional[str] = None
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    event_type: Optional[str] = None
    event_date: Optional[datetime] = None
    expected_guests: Optional[int] = Field(default=None, ge=1)
    discount_reason: Optional[str] = None
    terms_and_conditions: Optional[str] = None
    valid_until: Optional[datetime] = None

class QuotationUpdate(BaseModel):
    client_name: Optional[str] = None
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    event_type: Optional[str] = None
    event_date: Optional[datetime] = None
    expected_guests: Optional[int] = Field(default=None, ge=1)
    venue_rental_items: Optional[List[VenueRentalItem]] = None
    room_packages: Optional[List[RoomPackage]] = None
    menu_packages: Optional[List[MenuPackageSelection]] = None
    include_gst: Optional[bool] = None
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[float] = Field(default=None, ge=0)
    discount_reason: Optional[str] = None
    terms_and_conditions: Optional[str] = None
    valid_until: Optional[datetime] = None

class QuotationStatusUpdate(BaseModel):
    status: QuotationStatus

class QuotationPackageCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    venue_rental_items: List[VenueRentalItem] = []
    room_packages: List[RoomPackage] = []
    menu_packages: List[MenuPackageSelection] = []
    include_gst: bool = False
    default_discount_type: Optional[DiscountType] = None
    default_discount_value: float = Field(default=0, ge=0)
    check_in_time: str = "14:00"
    check_out_time: str = "11:00"
    is_active: bool = True

class QuotationPackageUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    venue_rental_items: Optional[List[VenueRentalItem]] = None
    room_packages: Optional[List[RoomPackage]] = None
    menu_packages: Optional[List[MenuPackageSelection]] = None
    include_gst: Optional[bool] = None
    default_discount_type: Optional[DiscountType] = None
    default_discount_value: Optional[float] = Field(default=None, ge=0)
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None
    is_active: Optional[bool] = None
