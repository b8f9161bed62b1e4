from fastapi import Depends
from venuedesk.modules.audit.dependencies import get_audit_service
from venuedesk.modules.audit.service import AuditService
from venuedesk.modules.bookings.repository import BookingRepository
from venuedesk.modules.bookings.service import BookingService
from venuedesk.modules.enquiries.repository import EnquiryRepository

def get_booking_service(
    booking_repo: BookingRepository = Depends(),
    enquiry_repo: EnquiryRepository = Depends(),
    audit_service: AuditService = Depends(get_audit_service),
) -> BookingService:
    return BookingService(booking_repo, enquiry_repo, audit_service)
