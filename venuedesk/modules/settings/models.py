from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime, timezone
from venuedesk.core.config import DEFAULT_MAX_DISCOUNT_PERCENTAGE

SYSTEM_SETTINGS_ID = "system"


class SystemSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str = SYSTEM_SETTINGS_ID
    max_discount_percentage: float = DEFAULT_MAX_DISCOUNT_PERCENTAGE
    updated_by: Optional[str] = None
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
