from fastapi import HTTPException
import logging
from typing import Dict, Optional
from datetime import datetime, timezone
from venuedesk.modules.auth.utility import hash_password
from venuedesk.modules.audit.service import AuditService
from venuedesk.modules.users.repository import UserRepository
from venuedesk.modules.users.models import User, UserRole, DEFAULT_ROLE_PERMISSIONS, ROLE_DISPLAY_NAMES
from venuedesk.modules.users.schemas import UserCreate, UserUpdate, UserResponse


class UserService:
    def __init__(self,
                 user_repo: UserRepository,
                 audit_service: AuditService
                 ):
        self.user_repo = user_repo
        self.audit_service = audit_service

    async def list_users(self, role: Optional[UserRole], status: Optional[str]):
        query = {}
        if role:
            query["role"] = role.value
        if status:
            query["status"] = status
        users = await self.user_repo.find_users(query)
        return [UserResponse(**u) for u in users]

    async def list_roles(self):
        stored = {r["name"]: r for r in await self.user_repo.find_roles()}
        roles = []
        for role in UserRole:
            if role.value in stored:
                roles.append(stored[role.value])
            else:
                roles.append({
                    "name": role.value,
                    "display_name": ROLE_DISPLAY_NAMES[role],
                    "permissions": DEFAULT_ROLE_PERMISSIONS[role],
                })
        return roles

    async def create_user(self, data: UserCreate, current_user: Dict) -> UserResponse:
        if await self.user_repo.user_exists(data.email):
            raise HTTPException(status_code=400, detail="Email already registered")

        user = User(
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            phone=data.phone,
            role=data.role,
            hashed_password=hash_password(data.password),
        )
        inserted = await self.user_repo.create_user(user)

        await self.audit_service.log_business_action(
            current_user, "user_created", "users", user.id,
            {"email": user.email, "role": user.role.value},
        )
        logging.info(f"User {user.email} created with role {user.role.value}")
        return UserResponse(**inserted)

    async def update_user(self, user_id: str, data: UserUpdate) -> UserResponse:
        update_data = data.model_dump(exclude_none=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="Nothing to update")
        update_data["updated_at"] = datetime.now(timezone.utc)

        user = await self.user_repo.update_user_by_id(user_id, update_data)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return UserResponse(**user)

    async def change_role(self, user_id: str, role: UserRole, current_user: Dict) -> UserResponse:
        existing = await self.user_repo.find_user_by_id(user_id)
        if not existing:
            raise HTTPException(status_code=404, detail="User not found")

        user = await self.user_repo.update_user_by_id(
            user_id, {"role": role.value, "updated_at": datetime.now(timezone.utc)}
        )
        await self.audit_service.log_business_action(
            current_user, "user_role_changed", "users", user_id,
            {"from_role": existing.get("role"), "to_role": role.value},
        )
        return UserResponse(**user)

    async def delete_user(self, user_id: str, current_user: Dict):
        if user_id == current_user["id"]:
            raise HTTPException(status_code=400, detail="You cannot delete your own account")
        if not await self.user_repo.delete_user(user_id):
            raise HTTPException(status_code=404, detail="User not found")
        await self.audit_service.log_business_action(
            current_user, "user_deleted", "users", user_id, {},
        )
        return {"message": "User deleted successfully"}
