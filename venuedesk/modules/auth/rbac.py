"""
Role based access control.

Every role has a ``module -> action -> bool`` permission map. A document in
the ``roles`` collection overrides the built-in defaults for that role.
Admins bypass permission checks entirely.
"""

from typing import Dict
from fastapi import Depends, HTTPException, Request
from venuedesk.core.permissions import role_name
from venuedesk.modules.auth.utility import get_current_user
from venuedesk.modules.audit.dependencies import get_audit_service
from venuedesk.modules.audit.service import AuditService
from venuedesk.modules.users.models import DEFAULT_ROLE_PERMISSIONS, UserRole
from venuedesk.modules.users.repository import UserRepository


async def resolve_permissions(user: Dict, user_repo: UserRepository) -> Dict[str, Dict[str, bool]]:
    role = role_name(user)
    if role is None:
        return {}
    stored = await user_repo.find_role(role.value)
    if stored and stored.get("permissions"):
        return stored["permissions"]
    return DEFAULT_ROLE_PERMISSIONS.get(role, {})


def has_permission(permissions: Dict[str, Dict[str, bool]], module: str, action: str) -> bool:
    return permissions.get(module, {}).get(action) is True


def require_permission(module: str, action: str):
    async def checker(
        request: Request,
        current_user: Dict = Depends(get_current_user),
        user_repo: UserRepository = Depends(),
        audit_service: AuditService = Depends(get_audit_service),
    ) -> Dict:
        if role_name(current_user) == UserRole.admin:
            return current_user

        permissions = await resolve_permissions(current_user, user_repo)
        if not has_permission(permissions, module, action):
            await audit_service.log(
                "access_denied",
                module,
                user=current_user,
                resource_type=action,
                details={
                    "required_permission": f"{module}.{action}",
                    "path": request.url.path,
                    "method": request.method,
                },
                ip_address=request.client.host if request.client else None,
                user_agent=request.headers.get("user-agent", ""),
            )
            raise HTTPException(
                status_code=403,
                detail={"message": "Insufficient permissions", "required": f"{module}.{action}"},
            )
        return current_user

    return checker


def require_role(*allowed_roles: UserRole):
    async def checker(current_user: Dict = Depends(get_current_user)) -> Dict:
        role = role_name(current_user)
        if role not in allowed_roles:
            raise HTTPException(
                status_code=403,
                detail={
                    "message": "Insufficient role",
                    "required": [r.value for r in allowed_roles],
                    "current": role.value if role else None,
                },
            )
        return current_user

    return checker
