from fastapi import APIRouter, Depends
from typing import Dict
from venuedesk.modules.auth.schemas import TokenResponse
from venuedesk.modules.users.schemas import UserLogin, CurrentUserResponse
from venuedesk.modules.auth.service import AuthService
from venuedesk.modules.auth.dependencies import get_auth_service
from venuedesk.modules.auth.utility import get_current_user

auth_router = APIRouter(prefix="/auth", tags=["Auth"])

@auth_router.post("/login", response_model=TokenResponse)
async def login(
    data: UserLogin,
    service: AuthService = Depends(get_auth_service)
    ):
    return await service.login(data)

@auth_router.post("/logout")
async def logout(
    current_user: Dict = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service)
    ):
    return await service.logout(current_user)

@auth_router.get("/me", response_model=CurrentUserResponse)
async def get_me(
    current_user: Dict = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service)
    ):
    return await service.get_me(current_user)
