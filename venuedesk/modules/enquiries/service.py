from fastapi import HTTPException
import logging
import re
from typing import Dict, List, Optional, Tuple
from datetime import datetime, timezone
from venuedesk.core.permissions import can_edit_resource, user_id
from venuedesk.modules.audit.service import AuditService
from venuedesk.modules.bookings.conflicts import Conflict, ConflictQuery, check_conflicts, date_part, find_conflicts
from venuedesk.modules.bookings.models import BookingStatus, EventSession
from venuedesk.modules.bookings.repository import BookingRepository
from venuedesk.modules.enquiries.models import (
    Enquiry, EnquiryStatus, AssignmentStatus, FollowUp, StatusChange,
    STATUS_FLOW, BLOCKING_ENQUIRY_STATUSES,
)
from venuedesk.modules.enquiries.repository import EnquiryRepository
from venuedesk.modules.enquiries.schemas import (
    EnquiryCreate, EnquiryUpdate, EnquiryPage, PublicEnquiryCreate, PublicEnquiryStatus,
    FollowUpCreate, PhoneLookup,
)

PUBLIC_FORM_CREATOR = "public_form"


def format_enquiry_number(when: datetime, seq: int) -> str:
    return f"ENQ-{when.year}-{when.month:02d}-{seq:03d}"


def check_transition(current: EnquiryStatus, target: EnquiryStatus, lost_reason: Optional[str]):
    if target not in STATUS_FLOW[current]:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid status transition from {current.value} to {target.value}",
        )
    if target == EnquiryStatus.lost and not lost_reason:
        raise HTTPException(status_code=400, detail="lost_reason is required when marking an enquiry as lost")


def status_change(current: Optional[str], target: EnquiryStatus,
                  changed_by: Optional[str], note: Optional[str] = None) -> Tuple[Dict, Dict]:
    """``$set`` and ``$push`` parts moving an enquiry to ``target``."""
    entry = StatusChange(
        from_status=EnquiryStatus(current) if current else None,
        to_status=target,
        changed_by=changed_by,
        note=note,
    )
    now = datetime.now(timezone.utc)
    return (
        {"status": target.value, "updated_at": now},
        {"status_history": entry.model_dump()},
    )


class EnquiryService:
    def __init__(self,
                 enquiry_repo: EnquiryRepository,
                 booking_repo: BookingRepository,
                 audit_service: AuditService
                 ):
        self.enquiry_repo = enquiry_repo
        self.booking_repo = booking_repo
        self.audit_service = audit_service

    async def _next_number(self) -> str:
        now = datetime.now(timezone.utc)
        seq = await self.enquiry_repo.next_enquiry_sequence(now.year, now.month)
        return format_enquiry_number(now, seq)

    async def find_collisions(self, sessions: List[EventSession],
                              exclude_enquiry_id: Optional[str] = None) -> List[Conflict]:
        """Sessions of booked bookings and converted enquiries overlapping ``sessions``."""
        if not sessions:
            return []

        holders = await self.booking_repo.find_bookings_by_status([BookingStatus.booked.value])
        holders += [
            e for e in await self.enquiry_repo.find_enquiries_by_status(BLOCKING_ENQUIRY_STATUSES)
            if e.get("id") != exclude_enquiry_id
        ]
        holders = [h for h in holders if h.get("sessions")]

        conflicts: List[Conflict] = []
        for session in sessions:
            query = ConflictQuery(
                venue=session.venue,
                date=date_part(session.session_date),
                start_time=session.start_time,
                end_time=session.end_time,
            )
            conflicts.extend(find_conflicts(query, holders))
        return conflicts

    async def create_enquiry(self, data: EnquiryCreate, current_user: Dict):
        try:
            if await self.find_collisions(data.sessions):
                raise HTTPException(
                    status_code=409,
                    detail="Venue collision with existing converted/booked record. Creation blocked.",
                )

            creator = user_id(current_user)
            fields = data.model_dump(exclude={"sessions"})
            fields["salesperson_id"] = data.salesperson_id or creator
            enquiry = Enquiry(
                **fields,
                enquiry_number=await self._next_number(),
                created_by=creator,
                sessions=data.sessions,
                status_history=[StatusChange(to_status=EnquiryStatus.new, changed_by=creator)],
            )
            doc = enquiry.model_dump()
            await self.enquiry_repo.add_enquiry(doc)
            doc.pop("_id", None)

            await self.audit_service.log_business_action(
                current_user, "enquiry_created", "enquiries", enquiry.id,
                {
                    "enquiry_number": enquiry.enquiry_number,
                    "client_name": enquiry.client_name,
                    "event_type": enquiry.event_type,
                    "expected_pax": enquiry.expected_pax,
                    "source": enquiry.source,
                    "salesperson_id": enquiry.salesperson_id,
                },
            )
            logging.info(f"Enquiry {enquiry.enquiry_number} created by {creator}")
            return doc
        except HTTPException:
            raise
        except Exception as e:
            logging.error(f"Error in create_enquiry: {e}")
            raise HTTPException(status_code=500, detail="Failed to create enquiry")

    async def list_enquiries(self,
                             status: Optional[EnquiryStatus] = None,
                             salesperson_id: Optional[str] = None,
                             assignment_status: Optional[AssignmentStatus] = None,
                             search: Optional[str] = None,
                             page: Optional[int] = None,
                             page_size: Optional[int] = None):
        query: Dict = {}
        if status:
            query["status"] = status.value
        if salesperson_id:
            query["salesperson_id"] = salesperson_id
        if assignment_status:
            query["assignment_status"] = assignment_status.value
        if search:
            pattern = {"$regex": re.escape(search), "$options": "i"}
            query["$or"] = [
                {"client_name": pattern},
                {"contact_number": pattern},
                {"enquiry_number": pattern},
            ]

        if page is not None and page_size is not None:
            total = await self.enquiry_repo.count_enquiries(query)
            data = await self.enquiry_repo.find_enquiries(query, skip=(page - 1) * page_size, limit=page_size)
            return EnquiryPage(data=data, total=total, page=page, page_size=page_size)
        return await self.enquiry_repo.find_enquiries(query)

    async def get_enquiry(self, enquiry_id: str):
        enquiry = await self.enquiry_repo.find_enquiry_by_id(enquiry_id)
        if not enquiry:
            raise HTTPException(status_code=404, detail="Enquiry not found")
        return enquiry

    async def search_by_phone(self, phone: str) -> PhoneLookup:
        previous = await self.enquiry_repo.find_latest_by_contact(phone)
        if not previous:
            return PhoneLookup(found=False)
        return PhoneLookup(
            found=True,
            client_name=previous.get("client_name"),
            email=previous.get("email"),
            city=previous.get("city"),
            contact_number=previous.get("contact_number") or phone,
        )

    async def update_enquiry(self, enquiry_id: str, data: EnquiryUpdate, current_user: Dict):
        existing = await self.get_enquiry(enquiry_id)
        if not can_edit_resource(current_user, existing):
            raise HTTPException(status_code=403, detail="You do not have permission to edit this enquiry")

        update_data = data.model_dump(exclude_none=True, exclude={"status", "sessions"})
        push = None
        target = data.status
        current = EnquiryStatus(existing.get("status", EnquiryStatus.new.value))
        if target is not None and target != current:
            check_transition(current, target, data.lost_reason or existing.get("lost_reason"))
            status_set, push = status_change(current.value, target, user_id(current_user))
            update_data.update(status_set)

        if data.sessions is not None:
            if await self.find_collisions(data.sessions, exclude_enquiry_id=enquiry_id):
                raise HTTPException(
                    status_code=409,
                    detail="Venue collision with existing converted/booked record. Update blocked.",
                )
            update_data["sessions"] = [s.model_dump() for s in data.sessions]

        if not update_data:
            raise HTTPException(status_code=400, detail="Nothing to update")
        update_data["updated_at"] = datetime.now(timezone.utc)

        enquiry = await self.enquiry_repo.update_enquiry(enquiry_id, update_data, push)
        if not enquiry:
            raise HTTPException(status_code=404, detail="Enquiry not found")

        await self.audit_service.log_business_action(
            current_user, "enquiry_updated", "enquiries", enquiry_id,
            {"fields": sorted(k for k in update_data if k != "updated_at")},
        )
        if push:
            await self.audit_service.log_business_action(
                current_user, "enquiry_status_changed", "enquiries", enquiry_id,
                {
                    "from_status": current.value,
                    "to_status": target.value,
                    "enquiry_number": enquiry.get("enquiry_number"),
                },
            )
        return enquiry

    async def delete_enquiry(self, enquiry_id: str, current_user: Dict):
        enquiry = await self.get_enquiry(enquiry_id)
        try:
            quotations = await self.enquiry_repo.delete_quotations_for_enquiry(enquiry_id)
            bookings = await self.booking_repo.unlink_enquiry(enquiry_id)
            follow_ups = await self.enquiry_repo.delete_follow_ups_for_enquiry(enquiry_id)
            await self.enquiry_repo.delete_enquiry(enquiry_id)
        except Exception as e:
            logging.error(f"Error in delete_enquiry: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete enquiry")

        deleted = {"quotations": quotations, "bookings_unlinked": bookings, "follow_ups": follow_ups}
        await self.audit_service.log_business_action(
            current_user, "enquiry_deleted", "enquiries", enquiry_id,
            {"enquiry_number": enquiry.get("enquiry_number"), "deleted_counts": deleted},
        )
        return {"message": "Enquiry and all related data deleted successfully", "deleted": deleted}

    async def claim_enquiry(self, enquiry_id: str, current_user: Dict):
        enquiry = await self.get_enquiry(enquiry_id)
        if enquiry.get("assignment_status") == AssignmentStatus.assigned.value and enquiry.get("salesperson_id"):
            raise HTTPException(status_code=400, detail="This enquiry is already claimed by another employee")

        uid = user_id(current_user)
        updated = await self.enquiry_repo.claim_enquiry(enquiry_id, {
            "salesperson_id": uid,
            "assignment_status": AssignmentStatus.assigned.value,
            "updated_at": datetime.now(timezone.utc),
        })
        if not updated:
            raise HTTPException(status_code=400, detail="This enquiry is already claimed by another employee")

        await self.audit_service.log_business_action(
            current_user, "enquiry_claimed", "enquiries", enquiry_id,
            {"enquiry_number": enquiry.get("enquiry_number"), "claimed_by": uid},
        )
        return {"success": True, "message": "Enquiry claimed successfully", "data": updated}

    async def unclaim_enquiry(self, enquiry_id: str, current_user: Dict):
        enquiry = await self.get_enquiry(enquiry_id)
        uid = user_id(current_user)
        if uid is None or enquiry.get("salesperson_id") != uid:
            raise HTTPException(status_code=403, detail="You can only unclaim enquiries that you have claimed")

        updated = await self.enquiry_repo.update_enquiry(enquiry_id, {
            "salesperson_id": None,
            "assignment_status": AssignmentStatus.unassigned.value,
            "updated_at": datetime.now(timezone.utc),
        })
        await self.audit_service.log_business_action(
            current_user, "enquiry_unclaimed", "enquiries", enquiry_id,
            {"enquiry_number": enquiry.get("enquiry_number"), "unclaimed_by": uid},
        )
        return {"success": True, "message": "Enquiry unclaimed successfully", "data": updated}

    async def check_conflicts(self, query: ConflictQuery):
        bookings = await self.booking_repo.find_active_bookings_for_venue(query.venue)
        return check_conflicts(query, bookings)

    # Follow-ups

    async def add_follow_up(self, enquiry_id: str, data: FollowUpCreate, current_user: Dict):
        await self.get_enquiry(enquiry_id)
        follow_up = FollowUp(enquiry_id=enquiry_id, set_by_id=user_id(current_user), **data.model_dump())
        doc = follow_up.model_dump()
        await self.enquiry_repo.add_follow_up(doc)
        doc.pop("_id", None)
        await self.enquiry_repo.update_enquiry(enquiry_id, {
            "follow_up_date": follow_up.follow_up_date,
            "updated_at": datetime.now(timezone.utc),
        })
        return doc

    async def list_follow_ups(self, enquiry_id: str):
        return await self.enquiry_repo.find_follow_ups(enquiry_id)

    async def follow_up_stats(self, enquiry_id: str):
        follow_ups = await self.enquiry_repo.find_follow_ups(enquiry_id)
        return {
            "total": len(follow_ups),
            "completed": sum(1 for f in follow_ups if f.get("completed")),
        }

    async def list_pending_follow_ups(self):
        return await self.enquiry_repo.find_pending_follow_ups()

    async def complete_follow_up(self, follow_up_id: str, notes: Optional[str], current_user: Dict):
        follow_up = await self.enquiry_repo.update_follow_up(follow_up_id, {
            "completed": True,
            "completed_at": datetime.now(timezone.utc),
            "completed_by_id": user_id(current_user),
            "completion_notes": notes,
        })
        if not follow_up:
            raise HTTPException(status_code=404, detail="Follow-up not found")
        return follow_up

    async def complete_all_follow_ups(self, enquiry_id: str, current_user: Dict):
        await self.get_enquiry(enquiry_id)
        completed = await self.enquiry_repo.complete_follow_ups_for_enquiry(enquiry_id, {
            "completed": True,
            "completed_at": datetime.now(timezone.utc),
            "completed_by_id": user_id(current_user),
        })
        await self.audit_service.log_business_action(
            current_user, "follow_ups_completed", "enquiries", enquiry_id, {"count": completed},
        )
        return {"message": "All follow-ups completed successfully", "completed": completed}

    # Public intake

    async def create_public_enquiry(self, data: PublicEnquiryCreate):
        enquiry = Enquiry(
            **data.model_dump(),
            enquiry_number=await self._next_number(),
            source="website",
            salesperson_id=None,
            created_by=PUBLIC_FORM_CREATOR,
            assignment_status=AssignmentStatus.unassigned,
            status_history=[StatusChange(to_status=EnquiryStatus.new, changed_by=PUBLIC_FORM_CREATOR)],
        )
        await self.enquiry_repo.add_enquiry(enquiry.model_dump())
        await self.audit_service.log(
            "enquiry_created",
            "enquiries",
            user_id=PUBLIC_FORM_CREATOR,
            resource_type="enquiry",
            resource_id=enquiry.id,
            details={"enquiry_number": enquiry.enquiry_number, "source": "website"},
        )
        logging.info(f"Public enquiry {enquiry.enquiry_number} received")
        return self._public_view(enquiry.model_dump())

    async def get_public_status(self, enquiry_number: str) -> PublicEnquiryStatus:
        enquiry = await self.enquiry_repo.find_enquiry_by_number(enquiry_number)
        if not enquiry:
            raise HTTPException(status_code=404, detail="Enquiry not found")
        return self._public_view(enquiry)

    @staticmethod
    def _public_view(enquiry: Dict) -> PublicEnquiryStatus:
        return PublicEnquiryStatus(**{k: enquiry[k] for k in PublicEnquiryStatus.model_fields})
