from fastapi import APIRouter, Depends, Query
from typing import Dict, Optional
from datetime import datetime
from venuedesk.modules.auth.rbac import require_permission
from venuedesk.modules.bookings.conflicts import ConflictQuery, ConflictReport
from venuedesk.modules.bookings.dependencies import get_booking_service
from venuedesk.modules.bookings.models import BookingStatus
from venuedesk.modules.bookings.schemas import BookingCreate, BookingUpdate
from venuedesk.modules.bookings.service import BookingService

booking_router = APIRouter(prefix="/bookings", tags=["Bookings"])

@booking_router.post("/", status_code=201)
async def create_booking(
    data: BookingCreate,
    current_user: Dict = Depends(require_permission("bookings", "create")),
    booking_service: BookingService = Depends(get_booking_service),
    ):
    return await booking_service.create_booking(data, current_user)

@booking_router.get("/")
async def list_bookings(
    status: Optional[BookingStatus] = None,
    enquiry_id: Optional[str] = None,
    search: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    page: Optional[int] = Query(default=None, ge=1),
    page_size: Optional[int] = Query(default=None, ge=1, le=200),
    current_user: Dict = Depends(require_permission("bookings", "read")),
    booking_service: BookingService = Depends(get_booking_service),
    ):
    return await booking_service.list_bookings(
        status, enquiry_id, search, date_from, date_to, page, page_size
    )

@booking_router.post("/check-conflicts", response_model=ConflictReport)
async def check_conflicts(
    query: ConflictQuery,
    current_user: Dict = Depends(require_permission("bookings", "read")),
    booking_service: BookingService = Depends(get_booking_service),
    ):
    return await booking_service.check_conflicts(query)

@booking_router.get("/{booking_id}")
async def get_booking(
    booking_id: str,
    current_user: Dict = Depends(require_permission("bookings", "read")),
    booking_service: BookingService = Depends(get_booking_service),
    ):
    return await booking_service.get_booking(booking_id)

@booking_router.patch("/{booking_id}")
async def update_booking(
    booking_id: str,
    data: BookingUpdate,
    current_user: Dict = Depends(require_permission("bookings", "update")),
    booking_service: BookingService = Depends(get_booking_service),
    ):
    return await booking_service.update_booking(booking_id, data, current_user)
