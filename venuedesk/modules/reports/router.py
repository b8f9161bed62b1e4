from fastapi import APIRouter, Depends
from typing import Dict, List, Optional
from datetime import datetime
from venuedesk.modules.auth.rbac import require_permission
from venuedesk.modules.reports.dependencies import get_report_service
from venuedesk.modules.reports.schemas import (
    DashboardMetrics, EnquiryPipelineReport, FollowUpPerformanceReport,
    BookingAnalyticsReport, TeamMemberPerformance,
)
from venuedesk.modules.reports.service import ReportService

report_router = APIRouter(prefix="/reports", tags=["Reports"])

@report_router.get("/dashboard", response_model=DashboardMetrics)
async def dashboard_metrics(
    current_user: Dict = Depends(require_permission("reports", "view")),
    report_service: ReportService = Depends(get_report_service),
    ):
    return await report_service.dashboard_metrics()

@report_router.get("/enquiry-pipeline", response_model=EnquiryPipelineReport)
async def enquiry_pipeline(
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    current_user: Dict = Depends(require_permission("reports", "view")),
    report_service: ReportService = Depends(get_report_service),
    ):
    return await report_service.enquiry_pipeline(date_from, date_to, current_user)

@report_router.get("/follow-up-performance", response_model=FollowUpPerformanceReport)
async def follow_up_performance(
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    current_user: Dict = Depends(require_permission("reports", "view")),
    report_service: ReportService = Depends(get_report_service),
    ):
    return await report_service.follow_up_performance(date_from, date_to)

@report_router.get("/booking-analytics", response_model=BookingAnalyticsReport)
async def booking_analytics(
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    current_user: Dict = Depends(require_permission("reports", "view")),
    report_service: ReportService = Depends(get_report_service),
    ):
    return await report_service.booking_analytics(date_from, date_to)

@report_router.get("/team-performance", response_model=List[TeamMemberPerformance])
async def team_performance(
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    current_user: Dict = Depends(require_permission("reports", "view")),
    report_service: ReportService = Depends(get_report_service),
    ):
    return await report_service.team_performance(date_from, date_to)
