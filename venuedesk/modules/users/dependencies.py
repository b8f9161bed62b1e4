from fastapi import Depends
from venuedesk.modules.audit.dependencies import get_audit_service
from venuedesk.modules.audit.service import AuditService
from venuedesk.modules.users.repository import UserRepository
from venuedesk.modules.users.service import UserService

def get_user_service(
    user_repo: UserRepository = Depends(),
    audit_service: AuditService = Depends(get_audit_service),
) -> UserService:
    return UserService(user_repo, audit_service)
