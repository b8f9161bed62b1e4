from fastapi import APIRouter, Depends
from typing import Dict
from venuedesk.modules.auth.rbac import require_permission
from venuedesk.modules.auth.utility import get_current_user
from venuedesk.modules.rooms.dependencies import get_room_service
from venuedesk.modules.rooms.schemas import VenueCreate, VenueUpdate, RoomTypeCreate, RoomTypeUpdate
from venuedesk.modules.rooms.service import RoomService

room_router = APIRouter(prefix="/rooms", tags=["Rooms"])

@room_router.get("/venues")
async def list_venues(
    current_user: Dict = Depends(get_current_user),
    room_service: RoomService = Depends(get_room_service),
    ):
    return await room_service.list_venues()

@room_router.get("/venues/{venue_id}")
async def get_venue(
    venue_id: str,
    current_user: Dict = Depends(get_current_user),
    room_service: RoomService = Depends(get_room_service),
    ):
    return await room_service.get_venue(venue_id)

@room_router.post("/venues", status_code=201)
async def create_venue(
    data: VenueCreate,
    current_user: Dict = Depends(require_permission("settings", "manage")),
    room_service: RoomService = Depends(get_room_service),
    ):
    return await room_service.create_venue(data, current_user)

@room_router.put("/venues/{venue_id}")
async def update_venue(
    venue_id: str,
    data: VenueUpdate,
    current_user: Dict = Depends(require_permission("settings", "manage")),
    room_service: RoomService = Depends(get_room_service),
    ):
    return await room_service.update_venue(venue_id, data, current_user)

@room_router.delete("/venues/{venue_id}")
async def delete_venue(
    venue_id: str,
    current_user: Dict = Depends(require_permission("settings", "manage")),
    room_service: RoomService = Depends(get_room_service),
    ):
    return await room_service.delete_venue(venue_id, current_user)

@room_router.get("/types")
async def list_room_types(
    current_user: Dict = Depends(get_current_user),
    room_service: RoomService = Depends(get_room_service),
    ):
    return await room_service.list_room_types()

@room_router.get("/types/{room_type_id}")
async def get_room_type(
    room_type_id: str,
    current_user: Dict = Depends(get_current_user),
    room_service: RoomService = Depends(get_room_service),
    ):
    return await room_service.get_room_type(room_type_id)

@room_router.post("/types", status_code=201)
async def create_room_type(
    data: RoomTypeCreate,
    current_user: Dict = Depends(require_permission("settings", "manage")),
    room_service: RoomService = Depends(get_room_service),
    ):
    return await room_service.create_room_type(data, current_user)

@room_router.put("/types/{room_type_id}")
async def update_room_type(
    room_type_id: str,
    data: RoomTypeUpdate,
    current_user: Dict = Depends(require_permission("settings", "manage")),
    room_service: RoomService = Depends(get_room_service),
    ):
    return await room_service.update_room_type(room_type_id, data, current_user)

@room_router.delete("/types/{room_type_id}")
async def delete_room_type(
    room_type_id: str,
    current_user: Dict = Depends(require_permission("settings", "manage")),
    room_service: RoomService = Depends(get_room_service),
    ):
    return await room_service.delete_room_type(room_type_id, current_user)
