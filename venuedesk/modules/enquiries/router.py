from fastapi import APIRouter, Depends, Query
from typing import Dict, Optional
from venuedesk.modules.auth.rbac import require_permission
from venuedesk.modules.bookings.conflicts import ConflictQuery, ConflictReport
from venuedesk.modules.enquiries.dependencies import get_enquiry_service
from venuedesk.modules.enquiries.models import EnquiryStatus, AssignmentStatus
from venuedesk.modules.enquiries.schemas import (
    EnquiryCreate, EnquiryUpdate, PublicEnquiryCreate, PublicEnquiryStatus,
    FollowUpCreate, FollowUpComplete, PhoneLookup,
)
from venuedesk.modules.enquiries.service import EnquiryService

enquiry_router = APIRouter(prefix="/enquiries", tags=["Enquiries"])
follow_up_router = APIRouter(prefix="/follow-ups", tags=["Enquiries"])
public_enquiry_router = APIRouter(prefix="/public/enquiries", tags=["Public"])

@enquiry_router.post("/", status_code=201)
async def create_enquiry(
    data: EnquiryCreate,
    current_user: Dict = Depends(require_permission("enquiries", "create")),
    enquiry_service: EnquiryService = Depends(get_enquiry_service),
    ):
    return await enquiry_service.create_enquiry(data, current_user)

@enquiry_router.get("/")
async def list_enquiries(
    status: Optional[EnquiryStatus] = None,
    salesperson_id: Optional[str] = None,
    assignment_status: Optional[AssignmentStatus] = None,
    search: Optional[str] = None,
    page: Optional[int] = Query(default=None, ge=1),
    page_size: Optional[int] = Query(default=None, ge=1, le=200),
    current_user: Dict = Depends(require_permission("enquiries", "read")),
    enquiry_service: EnquiryService = Depends(get_enquiry_service),
    ):
    return await enquiry_service.list_enquiries(
        status, salesperson_id, assignment_status, search, page, page_size
    )

@enquiry_router.get("/search-by-phone", response_model=PhoneLookup)
async def search_by_phone(
    phone: str = Query(min_length=1),
    current_user: Dict = Depends(require_permission("enquiries", "read")),
    enquiry_service: EnquiryService = Depends(get_enquiry_service),
    ):
    return await enquiry_service.search_by_phone(phone)

@enquiry_router.post("/check-conflicts", response_model=ConflictReport)
async def check_conflicts(
    query: ConflictQuery,
    current_user: Dict = Depends(require_permission("enquiries", "read")),
    enquiry_service: EnquiryService = Depends(get_enquiry_service),
    ):
    return await enquiry_service.check_conflicts(query)

@enquiry_router.get("/{enquiry_id}")
async def get_enquiry(
    enquiry_id: str,
    current_user: Dict = Depends(require_permission("enquiries", "read")),
    enquiry_service: EnquiryService = Depends(get_enquiry_service),
    ):
    return await enquiry_service.get_enquiry(enquiry_id)

@enquiry_router.patch("/{enquiry_id}")
async def update_enquiry(
    enquiry_id: str,
    data: EnquiryUpdate,
    current_user: Dict = Depends(require_permission("enquiries", "update")),
    enquiry_service: EnquiryService = Depends(get_enquiry_service),
    ):
    return await enquiry_service.update_enquiry(enquiry_id, data, current_user)

@enquiry_router.delete("/{enquiry_id}")
async def delete_enquiry(
    enquiry_id: str,
    current_user: Dict = Depends(require_permission("enquiries", "delete")),
    enquiry_service: EnquiryService = Depends(get_enquiry_service),
    ):
    return await enquiry_service.delete_enquiry(enquiry_id, current_user)

@enquiry_router.post("/{enquiry_id}/claim")
async def claim_enquiry(
    enquiry_id: str,
    current_user: Dict = Depends(require_permission("enquiries", "update")),
    enquiry_service: EnquiryService = Depends(get_enquiry_service),
    ):
    return await enquiry_service.claim_enquiry(enquiry_id, current_user)

@enquiry_router.post("/{enquiry_id}/unclaim")
async def unclaim_enquiry(
    enquiry_id: str,
    current_user: Dict = Depends(require_permission("enquiries", "update")),
    enquiry_service: EnquiryService = Depends(get_enquiry_service),
    ):
    return await enquiry_service.unclaim_enquiry(enquiry_id, current_user)

@enquiry_router.get("/{enquiry_id}/follow-ups")
async def list_follow_ups(
    enquiry_id: str,
    current_user: Dict = Depends(require_permission("enquiries", "read")),
    enquiry_service: EnquiryService = Depends(get_enquiry_service),
    ):
    return await enquiry_service.list_follow_ups(enquiry_id)

@enquiry_router.get("/{enquiry_id}/follow-up-stats")
async def follow_up_stats(
    enquiry_id: str,
    current_user: Dict = Depends(require_permission("enquiries", "read")),
    enquiry_service: EnquiryService = Depends(get_enquiry_service),
    ):
    return await enquiry_service.follow_up_stats(enquiry_id)

@enquiry_router.post("/{enquiry_id}/follow-ups", status_code=201)
async def add_follow_up(
    enquiry_id: str,
    data: FollowUpCreate,
    current_user: Dict = Depends(require_permission("enquiries", "update")),
    enquiry_service: EnquiryService = Depends(get_enquiry_service),
    ):
    return await enquiry_service.add_follow_up(enquiry_id, data, current_user)

@enquiry_router.post("/{enquiry_id}/complete-all-followups")
async def complete_all_follow_ups(
    enquiry_id: str,
    current_user: Dict = Depends(require_permission("enquiries", "update")),
    enquiry_service: EnquiryService = Depends(get_enquiry_service),
    ):
    return await enquiry_service.complete_all_follow_ups(enquiry_id, current_user)

@follow_up_router.get("/")
async def list_pending_follow_ups(
    current_user: Dict = Depends(require_permission("enquiries", "read")),
    enquiry_service: EnquiryService = Depends(get_enquiry_service),
    ):
    return await enquiry_service.list_pending_follow_ups()

@follow_up_router.patch("/{follow_up_id}/complete")
async def complete_follow_up(
    follow_up_id: str,
    data: FollowUpComplete,
    current_user: Dict = Depends(require_permission("enquiries", "update")),
    enquiry_service: EnquiryService = Depends(get_enquiry_service),
    ):
    return await enquiry_service.complete_follow_up(follow_up_id, data.notes, current_user)

@public_enquiry_router.post("/", response_model=PublicEnquiryStatus, status_code=201)
async def create_public_enquiry(
    data: PublicEnquiryCreate,
    enquiry_service: EnquiryService = Depends(get_enquiry_service),
    ):
    return await enquiry_service.create_public_enquiry(data)

@public_enquiry_router.get("/{enquiry_number}", response_model=PublicEnquiryStatus)
async def get_public_enquiry(
    enquiry_number: str,
    enquiry_service: EnquiryService = Depends(get_enquiry_service),
    ):
    return await enquiry_service.get_public_status(enquiry_number)
