from fastapi import Depends
from venuedesk.modules.audit.dependencies import get_audit_service
from venuedesk.modules.audit.service import AuditService
from venuedesk.modules.bookings.repository import BookingRepository
from venuedesk.modules.enquiries.repository import EnquiryRepository
from venuedesk.modules.enquiries.service import EnquiryService

def get_enquiry_service(
    enquiry_repo: EnquiryRepository = Depends(),
    booking_repo: BookingRepository = Depends(),
    audit_service: AuditService = Depends(get_audit_service),
) -> EnquiryService:
    return EnquiryService(enquiry_repo, booking_repo, audit_service)
