from fastapi import HTTPException
import logging
from typing import Dict
from datetime import datetime, timezone
from venuedesk.core.permissions import user_id
from venuedesk.modules.audit.service import AuditService
from venuedesk.modules.settings.models import SystemSettings
from venuedesk.modules.settings.repository import SettingsRepository
from venuedesk.modules.settings.schemas import SystemSettingsUpdate, DiscountCheckResult


class SettingsService:
    def __init__(self,
                 settings_repo: SettingsRepository,
                 audit_service: AuditService
                 ):
        self.settings_repo = settings_repo
        self.audit_service = audit_service

    async def get_settings(self) -> SystemSettings:
        stored = await self.settings_repo.find_settings()
        return SystemSettings(**stored) if stored else SystemSettings()

    async def max_discount_percentage(self) -> float:
        return (await self.get_settings()).max_discount_percentage

    async def update_settings(self, data: SystemSettingsUpdate, current_user: Dict) -> SystemSettings:
        previous = await self.get_settings()
        try:
            stored = await self.settings_repo.upsert_settings({
                "max_discount_percentage": data.max_discount_percentage,
                "updated_by": user_id(current_user),
                "updated_at": datetime.now(timezone.utc),
            })
        except Exception as e:
            logging.error(f"Error in update_settings: {e}")
            raise HTTPException(status_code=500, detail="Failed to update system settings")

        await self.audit_service.log_business_action(
            current_user, "system_settings_updated", "settings", None,
            {
                "from_max_discount_percentage": previous.max_discount_percentage,
                "to_max_discount_percentage": data.max_discount_percentage,
            },
        )
        return SystemSettings(**stored)

    async def check_discount(self, discount_percentage: float) -> DiscountCheckResult:
        limit = await self.max_discount_percentage()
        return DiscountCheckResult(
            exceeds_limit=discount_percentage > limit,
            max_discount_percentage=limit,
        )
