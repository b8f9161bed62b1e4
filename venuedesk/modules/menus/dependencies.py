from fastapi import Depends
from venuedesk.modules.audit.dependencies import get_audit_service
from venuedesk.modules.audit.service import AuditService
from venuedesk.modules.menus.repository import MenuRepository
from venuedesk.modules.menus.service import MenuService

def get_menu_service(
    menu_repo: MenuRepository = Depends(),
    audit_service: AuditService = Depends(get_audit_service),
) -> MenuService:
    return MenuService(menu_repo, audit_service)
