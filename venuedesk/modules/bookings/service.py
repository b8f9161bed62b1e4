from fastapi import HTTPException
from contextlib import asynccontextmanager
import logging
import re
import uuid
from typing import Dict, List, Optional
from datetime import datetime, timezone
from venuedesk.core.permissions import can_edit_resource, user_id
from venuedesk.modules.audit.service import AuditService
from venuedesk.modules.bookings.conflicts import Conflict, ConflictQuery, check_conflicts, date_part, find_conflicts
from venuedesk.modules.bookings.models import Booking, BookingStatus, EventSession, INACTIVE_BOOKING_STATUSES
from venuedesk.modules.bookings.repository import BookingRepository
from venuedesk.modules.bookings.schemas import BookingCreate, BookingUpdate, BookingPage
from venuedesk.modules.enquiries.models import EnquiryStatus
from venuedesk.modules.enquiries.repository import EnquiryRepository
from venuedesk.modules.enquiries.service import status_change


def format_booking_number(year: int, seq: int) -> str:
    return f"BKG-{year}-{seq:03d}"


def venue_lock_keys(sessions: List[EventSession]) -> List[str]:
    return sorted({f"{s.venue}|{date_part(s.session_date)}" for s in sessions})


class BookingService:
    def __init__(self,
                 booking_repo: BookingRepository,
                 enquiry_repo: EnquiryRepository,
                 audit_service: AuditService
                 ):
        self.booking_repo = booking_repo
        self.enquiry_repo = enquiry_repo
        self.audit_service = audit_service

    @asynccontextmanager
    async def venue_locks(self, sessions: List[EventSession]):
        """Hold every venue-day touched by ``sessions`` for the duration of the block."""
        keys = venue_lock_keys(sessions)
        owner = str(uuid.uuid4())
        if not await self.booking_repo.acquire_venue_locks(keys, owner):
            raise HTTPException(status_code=409, detail="Venue is being booked by another user, please retry")
        try:
            yield
        finally:
            await self.booking_repo.release_venue_locks(keys, owner)

    async def find_session_conflicts(self, sessions: List[EventSession],
                                     exclude_booking_id: Optional[str] = None) -> List[Conflict]:
        by_venue: Dict[str, List[Dict]] = {}
        conflicts: List[Conflict] = []
        for session in sessions:
            if session.venue not in by_venue:
                by_venue[session.venue] = await self.booking_repo.find_active_bookings_for_venue(session.venue)
            query = ConflictQuery(
                venue=session.venue,
                date=date_part(session.session_date),
                start_time=session.start_time,
                end_time=session.end_time,
                exclude_booking_id=exclude_booking_id,
            )
            conflicts.extend(find_conflicts(query, by_venue[session.venue]))
        return conflicts

    @staticmethod
    def _conflict_error(conflicts: List[Conflict]) -> HTTPException:
        return HTTPException(
            status_code=409,
            detail={
                "message": "Venue conflict detected",
                "conflicts": [c.model_dump(mode="json") for c in conflicts],
                "details": "The selected venue and time slot conflicts with existing bookings",
            },
        )

    async def create_booking(self, data: BookingCreate, current_user: Dict):
        fields = data.model_dump(exclude={"sessions"})
        enquiry = None
        if data.enquiry_id:
            enquiry = await self.enquiry_repo.find_enquiry_by_id(data.enquiry_id)
            if not enquiry:
                raise HTTPException(status_code=404, detail="Linked enquiry not found")
            if enquiry.get("salesperson_id"):
                fields["salesperson_id"] = enquiry["salesperson_id"]
            fields["enquiry_number"] = enquiry.get("enquiry_number")

        creator = user_id(current_user)
        async with self.venue_locks(data.sessions):
            conflicts = await self.find_session_conflicts(data.sessions)
            if conflicts:
                logging.info(f"Booking for {data.client_name} blocked by {len(conflicts)} conflicts")
                raise self._conflict_error(conflicts)

            year = datetime.now(timezone.utc).year
            seq = await self.booking_repo.next_booking_sequence(year)
            booking = Booking(
                **fields,
                booking_number=format_booking_number(year, seq),
                balance_amount=data.total_amount - data.advance_amount,
                created_by=creator,
                sessions=data.sessions,
            )
            doc = booking.model_dump()
            await self.booking_repo.add_booking(doc)
            doc.pop("_id", None)

        if enquiry and enquiry.get("status") != EnquiryStatus.booked.value:
            status_set, push = status_change(
                enquiry.get("status"), EnquiryStatus.booked, creator,
                note=f"Booking {booking.booking_number} created",
            )
            await self.enquiry_repo.update_enquiry(enquiry["id"], status_set, push)

        await self.audit_service.log_business_action(
            current_user, "booking_created", "bookings", booking.id,
            {
                "booking_number": booking.booking_number,
                "client_name": booking.client_name,
                "event_type": booking.event_type,
                "confirmed_pax": booking.confirmed_pax,
                "total_amount": booking.total_amount,
                "advance_amount": booking.advance_amount,
                "balance_amount": booking.balance_amount,
            },
        )
        logging.info(f"Booking {booking.booking_number} created for {booking.client_name}")
        return doc

    async def list_bookings(self,
                            status: Optional[BookingStatus] = None,
                            enquiry_id: Optional[str] = None,
                            search: Optional[str] = None,
                            date_from: Optional[datetime] = None,
                            date_to: Optional[datetime] = None,
                            page: Optional[int] = None,
                            page_size: Optional[int] = None):
        query: Dict = {}
        if status:
            query["status"] = status.value
        if enquiry_id:
            query["enquiry_id"] = enquiry_id
        if search:
            pattern = {"$regex": re.escape(search), "$options": "i"}
            query["$or"] = [{"booking_number": pattern}, {"client_name": pattern}]
        if date_from or date_to:
            query["event_date"] = {}
            if date_from:
                query["event_date"]["$gte"] = date_from
            if date_to:
                query["event_date"]["$lte"] = date_to

        if page is not None and page_size is not None:
            total = await self.booking_repo.count_bookings(query)
            data = await self.booking_repo.find_bookings(query, skip=(page - 1) * page_size, limit=page_size)
            return BookingPage(data=data, total=total, page=page, page_size=page_size)
        return await self.booking_repo.find_bookings(query)

    async def get_booking(self, booking_id: str):
        booking = await self.booking_repo.find_booking_by_id(booking_id)
        if not booking:
            raise HTTPException(status_code=404, detail="Booking not found")
        return booking

    async def update_booking(self, booking_id: str, data: BookingUpdate, current_user: Dict):
        existing = await self.get_booking(booking_id)
        if not can_edit_resource(current_user, existing):
            raise HTTPException(status_code=403, detail="You do not have permission to edit this booking")

        old_status = existing.get("status")
        if data.status is not None and old_status in INACTIVE_BOOKING_STATUSES and data.status.value != old_status:
            raise HTTPException(
                status_code=400,
                detail=f"Cannot update status: Booking is already {old_status}. "
                       f"{old_status.capitalize()} bookings cannot have their status changed.",
            )

        update_data = data.model_dump(exclude_none=True, exclude={"sessions"})
        if "total_amount" in update_data or "advance_amount" in update_data:
            total = update_data.get("total_amount", existing.get("total_amount", 0))
            advance = update_data.get("advance_amount", existing.get("advance_amount", 0))
            if advance > total:
                raise HTTPException(status_code=400, detail="Advance amount cannot exceed total amount")
            update_data["balance_amount"] = total - advance

        if data.sessions is None:
            if not update_data:
                raise HTTPException(status_code=400, detail="Nothing to update")
            update_data["updated_at"] = datetime.now(timezone.utc)
            booking = await self.booking_repo.update_booking(booking_id, update_data)
        else:
            update_data["sessions"] = [s.model_dump() for s in data.sessions]
            update_data["updated_at"] = datetime.now(timezone.utc)
            async with self.venue_locks(data.sessions):
                conflicts = await self.find_session_conflicts(data.sessions, exclude_booking_id=booking_id)
                if conflicts:
                    raise self._conflict_error(conflicts)
                booking = await self.booking_repo.update_booking(booking_id, update_data)

        if not booking:
            raise HTTPException(status_code=404, detail="Booking not found")

        await self.audit_service.log_business_action(
            current_user, "booking_updated", "bookings", booking_id,
            {"fields": sorted(k for k in update_data if k != "updated_at")},
        )
        if data.status is not None and data.status.value != old_status:
            await self.audit_service.log_business_action(
                current_user, "booking_status_changed", "bookings", booking_id,
                {
                    "from_status": old_status,
                    "to_status": data.status.value,
                    "client_name": booking.get("client_name"),
                },
            )
        return booking

    async def check_conflicts(self, query: ConflictQuery):
        bookings = await self.booking_repo.find_active_bookings_for_venue(query.venue)
        return check_conflicts(query, bookings)
