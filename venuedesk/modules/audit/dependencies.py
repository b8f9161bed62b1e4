from fastapi import Depends
from venuedesk.modules.audit.repository import AuditRepository
from venuedesk.modules.audit.service import AuditService

def get_audit_service(
    audit_repo: AuditRepository = Depends(),
) -> AuditService:
    return AuditService(audit_repo)
