from fastapi import APIRouter, Depends, Query
from typing import Optional, Dict
from venuedesk.modules.auth.rbac import require_permission
from venuedesk.modules.audit.dependencies import get_audit_service
from venuedesk.modules.audit.service import AuditService

audit_router = APIRouter(prefix="/audit", tags=["Audit"])

@audit_router.get("/")
async def get_audit_logs(
    user_id: Optional[str] = None,
    module: Optional[str] = None,
    action: Optional[str] = None,
    limit: int = Query(default=100, ge=1, le=1000),
    current_user: Dict = Depends(require_permission("audit", "view")),
    audit_service: AuditService = Depends(get_audit_service),
):
    return await audit_service.get_logs(user_id, module, action, limit)
