from fastapi import Depends
from venuedesk.modules.audit.dependencies import get_audit_service
from venuedesk.modules.audit.service import AuditService
from venuedesk.modules.reports.repository import ReportRepository
from venuedesk.modules.reports.service import ReportService

def get_report_service(
    report_repo: ReportRepository = Depends(),
    audit_service: AuditService = Depends(get_audit_service),
) -> ReportService:
    return ReportService(report_repo, audit_service)
