from pydantic import BaseModel, Field


class SystemSettingsUpdate(BaseModel):
    max_discount_percentage: float = Field(ge=0, le=100)

class DiscountCheck(BaseModel):
    discount_percentage: float = Field(ge=0)

class DiscountCheckResult(BaseModel):
    exceeds_limit: bool
    max_discount_percentage: float
