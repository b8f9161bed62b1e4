from fastapi import HTTPException
import logging
from collections import Counter
from typing import Dict, Optional
from datetime import datetime, timezone
from venuedesk.modules.audit.service import AuditService
from venuedesk.modules.bookings.models import BookingStatus
from venuedesk.modules.enquiries.models import EnquiryStatus
from venuedesk.modules.reports.repository import ReportRepository
from venuedesk.modules.reports.schemas import (
    DashboardMetrics, EnquiryPipelineReport, FollowUpPerformanceReport,
    BookingAnalyticsReport, TeamMemberPerformance,
)

CONVERTED_STATUSES = [EnquiryStatus.converted.value, EnquiryStatus.booked.value]
INACTIVE_ENQUIRY_STATUSES = [EnquiryStatus.lost.value, EnquiryStatus.closed.value, EnquiryStatus.booked.value]


def month_bounds(now: datetime):
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


def created_between(date_from: Optional[datetime], date_to: Optional[datetime]) -> Dict:
    if not date_from and not date_to:
        return {}
    window = {}
    if date_from:
        window["$gte"] = date_from
    if date_to:
        window["$lte"] = date_to
    return {"created_at": window}


def percentage(part: int, whole: int, digits: int) -> float:
    return round(part / whole * 100, digits) if whole > 0 else 0


class ReportService:
    def __init__(self,
                 report_repo: ReportRepository,
                 audit_service: AuditService
                 ):
        self.report_repo = report_repo
        self.audit_service = audit_service

    async def dashboard_metrics(self) -> DashboardMetrics:
        try:
            start, end = month_bounds(datetime.now(timezone.utc))
            total = await self.report_repo.count_enquiries({})
            converted = await self.report_repo.count_enquiries({"status": {"$in": CONVERTED_STATUSES}})
            return DashboardMetrics(
                active_enquiries=await self.report_repo.count_enquiries(
                    {"status": {"$nin": INACTIVE_ENQUIRY_STATUSES}}
                ),
                booked_bookings=await self.report_repo.count_bookings({"status": BookingStatus.booked.value}),
                lost_enquiries=await self.report_repo.count_enquiries({"status": EnquiryStatus.lost.value}),
                conversion_rate=percentage(converted, total, 2),
                monthly_revenue=await self.report_repo.sum_booking_revenue({
                    "status": BookingStatus.booked.value,
                    "created_at": {"$gte": start, "$lt": end},
                }),
            )
        except Exception as e:
            logging.error(f"Error in dashboard_metrics: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch dashboard metrics")

    async def enquiry_pipeline(self, date_from: Optional[datetime], date_to: Optional[datetime],
                               current_user: Dict) -> EnquiryPipelineReport:
        try:
            enquiries = await self.report_repo.find_enquiries(
                created_between(date_from, date_to),
                {"status": 1, "source": 1, "lost_reason": 1},
            )
        except Exception as e:
            logging.error(f"Error in enquiry_pipeline: {e}")
            raise HTTPException(status_code=500, detail="Failed to generate enquiry pipeline report")

        statuses = Counter(e.get("status") for e in enquiries)
        sources = Counter(e["source"] for e in enquiries if e.get("source"))
        lost_reasons = Counter(
            e["lost_reason"] for e in enquiries
            if e.get("status") == EnquiryStatus.lost.value and e.get("lost_reason")
        )
        converted = sum(statuses.get(s, 0) for s in CONVERTED_STATUSES)

        report = EnquiryPipelineReport(
            total=len(enquiries),
            status_breakdown=dict(statuses),
            source_breakdown=dict(sources),
            lost_reasons=dict(lost_reasons),
            conversion_rate=percentage(converted, len(enquiries), 1),
        )
        await self.audit_service.log_business_action(
            current_user, "report_generated", "reports", "enquiry-pipeline",
            {
                "report_type": "enquiry_pipeline",
                "date_from": date_from.isoformat() if date_from else None,
                "date_to": date_to.isoformat() if date_to else None,
                "record_count": report.total,
            },
        )
        return report

    async def follow_up_performance(self, date_from: Optional[datetime],
                                    date_to: Optional[datetime]) -> FollowUpPerformanceReport:
        follow_ups = await self.report_repo.find_follow_ups(created_between(date_from, date_to))
        now = datetime.now(timezone.utc)

        completed = [f for f in follow_ups if f.get("completed")]
        overdue = [
            f for f in follow_ups
            if not f.get("completed") and f.get("follow_up_date") and _aware(f["follow_up_date"]) < now
        ]
        # Days late, counted only for follow-ups closed after their due date
        late_days = [
            (_aware(f["completed_at"]) - _aware(f["follow_up_date"])).total_seconds() / 86400
            for f in completed
            if f.get("completed_at") and f.get("follow_up_date")
            and _aware(f["completed_at"]) > _aware(f["follow_up_date"])
        ]
        return FollowUpPerformanceReport(
            total_follow_ups=len(follow_ups),
            completed_follow_ups=len(completed),
            overdue_follow_ups=len(overdue),
            completion_rate=percentage(len(completed), len(follow_ups), 1),
            avg_response_days=round(sum(late_days) / len(late_days), 2) if late_days else 0,
        )

    async def booking_analytics(self, date_from: Optional[datetime],
                                date_to: Optional[datetime]) -> BookingAnalyticsReport:
        bookings = await self.report_repo.find_bookings(
            created_between(date_from, date_to),
            {"status": 1, "total_amount": 1, "event_type": 1, "sessions": 1, "hall": 1},
        )
        revenue = sum(b.get("total_amount") or 0 for b in bookings)

        venues: Counter = Counter()
        for booking in bookings:
            sessions = booking.get("sessions") or []
            if sessions:
                venues.update(s.get("venue") for s in sessions if s.get("venue"))
            elif booking.get("hall"):
                venues[booking["hall"]] += 1

        return BookingAnalyticsReport(
            total_bookings=len(bookings),
            total_revenue=revenue,
            avg_booking_value=round(revenue / len(bookings), 2) if bookings else 0,
            status_breakdown=dict(Counter(b.get("status") for b in bookings)),
            event_type_breakdown=dict(Counter(b["event_type"] for b in bookings if b.get("event_type"))),
            venue_utilisation=dict(venues),
        )

    async def team_performance(self, date_from: Optional[datetime], date_to: Optional[datetime]):
        window = created_between(date_from, date_to)
        users = await self.report_repo.find_active_users()
        enquiries = await self.report_repo.find_enquiries(
            {**window, "salesperson_id": {"$ne": None}}, {"salesperson_id": 1, "status": 1},
        )
        bookings = await self.report_repo.find_bookings(
            {**window, "salesperson_id": {"$ne": None}}, {"salesperson_id": 1, "total_amount": 1, "status": 1},
        )

        rows = []
        for user in users:
            uid = user.get("id")
            mine = [e for e in enquiries if e.get("salesperson_id") == uid]
            converted = sum(1 for e in mine if e.get("status") in CONVERTED_STATUSES)
            lost = sum(1 for e in mine if e.get("status") == EnquiryStatus.lost.value)
            my_bookings = [b for b in bookings if b.get("salesperson_id") == uid]
            name = " ".join(p for p in (user.get("first_name"), user.get("last_name")) if p)
            rows.append(TeamMemberPerformance(
                salesperson_id=uid,
                salesperson_name=name or user.get("email") or "Unknown User",
                total_enquiries=len(mine),
                converted_enquiries=converted,
                lost_enquiries=lost,
                conversion_rate=percentage(converted, len(mine), 1),
                total_bookings=len(my_bookings),
                total_revenue=sum(b.get("total_amount") or 0 for b in my_bookings),
            ))

        rows.sort(key=lambda r: (-r.conversion_rate, r.salesperson_name))
        return rows


def _aware(value: datetime) -> datetime:
    # Mongo hands datetimes back naive, in UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
