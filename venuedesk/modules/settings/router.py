from fastapi import APIRouter, Depends
from typing import Dict
from venuedesk.modules.auth.rbac import require_permission
from venuedesk.modules.auth.utility import get_current_user
from venuedesk.modules.settings.dependencies import get_settings_service
from venuedesk.modules.settings.models import SystemSettings
from venuedesk.modules.settings.schemas import SystemSettingsUpdate, DiscountCheck, DiscountCheckResult
from venuedesk.modules.settings.service import SettingsService

settings_router = APIRouter(prefix="/system-settings", tags=["Settings"])

@settings_router.get("/", response_model=SystemSettings)
async def get_settings(
    current_user: Dict = Depends(get_current_user),
    settings_service: SettingsService = Depends(get_settings_service),
    ):
    return await settings_service.get_settings()

@settings_router.put("/", response_model=SystemSettings)
async def update_settings(
    data: SystemSettingsUpdate,
    current_user: Dict = Depends(require_permission("settings", "manage")),
    settings_service: SettingsService = Depends(get_settings_service),
    ):
    return await settings_service.update_settings(data, current_user)

@settings_router.post("/check-discount", response_model=DiscountCheckResult)
async def check_discount(
    data: DiscountCheck,
    current_user: Dict = Depends(get_current_user),
    settings_service: SettingsService = Depends(get_settings_service),
    ):
    return await settings_service.check_discount(data.discount_percentage)
