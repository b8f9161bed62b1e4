from fastapi import Depends
from venuedesk.modules.audit.dependencies import get_audit_service
from venuedesk.modules.audit.service import AuditService
from venuedesk.modules.settings.repository import SettingsRepository
from venuedesk.modules.settings.service import SettingsService

def get_settings_service(
    settings_repo: SettingsRepository = Depends(),
    audit_service: AuditService = Depends(get_audit_service),
) -> SettingsService:
    return SettingsService(settings_repo, audit_service)
