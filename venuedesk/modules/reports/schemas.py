from pydantic import BaseModel
from typing import Dict, Optional


class DashboardMetrics(BaseModel):
    active_enquiries: int
    booked_bookings: int
    lost_enquiries: int
    conversion_rate: float
    monthly_revenue: float

class EnquiryPipelineReport(BaseModel):
    total: int
    status_breakdown: Dict[str, int]
    source_breakdown: Dict[str, int]
    lost_reasons: Dict[str, int]
    conversion_rate: float

class FollowUpPerformanceReport(BaseModel):
    total_follow_ups: int
    completed_follow_ups: int
    overdue_follow_ups: int
    completion_rate: float
    avg_response_days: float

class BookingAnalyticsReport(BaseModel):
    total_bookings: int
    total_revenue: float
    avg_booking_value: float
    status_breakdown: Dict[str, int]
    event_type_breakdown: Dict[str, int]
    venue_utilisation: Dict[str, int]

class TeamMemberPerformance(BaseModel):
    salesperson_id: Optional[str]
    salesperson_name: str
    total_enquiries: int
    converted_enquiries: int
    lost_enquiries: int
    conversion_rate: float
    total_bookings: int
    total_revenue: float
