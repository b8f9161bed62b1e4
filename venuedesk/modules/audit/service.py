import logging
from typing import Any, Dict, Optional
from fastapi import HTTPException
from venuedesk.core.session_sync import SessionEvent
from venuedesk.modules.audit.models import AuditLog
from venuedesk.modules.audit.repository import AuditRepository
from venuedesk.core.permissions import role_name


class AuditService:
    def __init__(self, audit_repo: AuditRepository):
        self.audit_repo = audit_repo

    async def log(self, action: str, module: str, user: Optional[Dict] = None, **fields) -> AuditLog:
        user_id = fields.pop("user_id", None)
        user_role = fields.pop("user_role", None)
        if user:
            role = role_name(user)
            user_id = user.get("id")
            user_role = role.value if role else "unknown"
        entry = AuditLog(
            user_id=user_id,
            user_role=user_role,
            action=action,
            module=module,
            **fields,
        )
        try:
            await self.audit_repo.add_log(entry)
        except Exception as e:
            # The audited operation already happened; a lost entry must not fail it
            logging.error(f"Failed to write audit log {action}/{module}: {e}")
        return entry

    async def log_business_action(self, user: Dict, action: str, module: str,
                                  resource_id: Optional[str], details: Dict[str, Any]) -> AuditLog:
        return await self.log(
            action,
            module,
            user=user,
            resource_type=module,
            resource_id=resource_id,
            details={**details, "business_context": True},
        )

    async def on_session_event(self, event: SessionEvent) -> None:
        await self.log(
            event.type.value,
            "auth",
            user_id=event.user_id,
            details={"timestamp": event.timestamp.isoformat()},
        )

    async def get_logs(self, user_id: Optional[str], module: Optional[str],
                       action: Optional[str], limit: int):
        query: Dict[str, Any] = {}
        if user_id:
            query["user_id"] = user_id
        if module:
            query["module"] = module
        if action:
            query["action"] = action
        try:
            return await self.audit_repo.find_logs(query, limit)
        except Exception as e:
            logging.error(f"Error in get_logs: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch audit logs")
