from fastapi import Depends
from venuedesk.modules.audit.dependencies import get_audit_service
from venuedesk.modules.audit.service import AuditService
from venuedesk.modules.enquiries.repository import EnquiryRepository
from venuedesk.modules.quotations.repository import QuotationRepository
from venuedesk.modules.quotations.service import QuotationService
from venuedesk.modules.settings.dependencies import get_settings_service
from venuedesk.modules.settings.service import SettingsService

def get_quotation_service(
    quotation_repo: QuotationRepository = Depends(),
    enquiry_repo: EnquiryRepository = Depends(),
    settings_service: SettingsService = Depends(get_settings_service),
    audit_service: AuditService = Depends(get_audit_service),
) -> QuotationService:
    return QuotationService(quotation_repo, enquiry_repo, settings_service, audit_service)
