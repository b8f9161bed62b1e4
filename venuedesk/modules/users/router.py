from fastapi import APIRouter, Depends
from typing import Optional, Dict, List
from venuedesk.modules.auth.rbac import require_permission, require_role
from venuedesk.modules.auth.utility import get_current_user
from venuedesk.modules.users.dependencies import get_user_service
from venuedesk.modules.users.models import UserRole, UserStatus
from venuedesk.modules.users.schemas import UserCreate, UserUpdate, RoleUpdate, UserResponse
from venuedesk.modules.users.service import UserService

user_router = APIRouter(prefix="/users", tags=["User"])
role_router = APIRouter(prefix="/roles", tags=["User"])

@user_router.get("/", response_model=List[UserResponse])
async def list_users(
    role: Optional[UserRole] = None,
    status: Optional[UserStatus] = None,
    current_user: Dict = Depends(require_permission("users", "read")),
    user_service: UserService = Depends(get_user_service),
    ):
    return await user_service.list_users(role, status.value if status else None)

@user_router.post("/", response_model=UserResponse, status_code=201)
async def create_user(
    data: UserCreate,
    current_user: Dict = Depends(require_role(UserRole.admin)),
    user_service: UserService = Depends(get_user_service),
    ):
    return await user_service.create_user(data, current_user)

@user_router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    data: UserUpdate,
    current_user: Dict = Depends(require_role(UserRole.admin)),
    user_service: UserService = Depends(get_user_service),
    ):
    return await user_service.update_user(user_id, data)

@user_router.patch("/{user_id}/role", response_model=UserResponse)
async def change_role(
    user_id: str,
    data: RoleUpdate,
    current_user: Dict = Depends(require_role(UserRole.admin)),
    user_service: UserService = Depends(get_user_service),
    ):
    return await user_service.change_role(user_id, data.role, current_user)

@user_router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    current_user: Dict = Depends(require_role(UserRole.admin)),
    user_service: UserService = Depends(get_user_service),
    ):
    return await user_service.delete_user(user_id, current_user)

@role_router.get("/")
async def list_roles(
    current_user: Dict = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
    ):
    return await user_service.list_roles()
