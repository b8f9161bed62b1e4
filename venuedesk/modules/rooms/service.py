from fastapi import HTTPException
import logging
from typing import Dict
from datetime import datetime, timezone
from venuedesk.modules.audit.service import AuditService
from venuedesk.modules.rooms.models import Venue, RoomType
from venuedesk.modules.rooms.repository import RoomRepository
from venuedesk.modules.rooms.schemas import VenueCreate, VenueUpdate, RoomTypeCreate, RoomTypeUpdate


class RoomService:
    def __init__(self,
                 room_repo: RoomRepository,
                 audit_service: AuditService
                 ):
        self.room_repo = room_repo
        self.audit_service = audit_service

    async def list_venues(self):
        return await self.room_repo.find_venues()

    async def get_venue(self, venue_id: str):
        venue = await self.room_repo.find_venue_by_id(venue_id)
        if not venue:
            raise HTTPException(status_code=404, detail="Venue not found")
        return venue

    async def create_venue(self, data: VenueCreate, current_user: Dict):
        if await self.room_repo.find_venue_by_name(data.name):
            raise HTTPException(status_code=400, detail="A venue with this name already exists")

        venue = Venue(**data.model_dump())
        doc = venue.model_dump()
        await self.room_repo.add_venue(doc)
        doc.pop("_id", None)

        await self.audit_service.log_business_action(
            current_user, "venue_created", "settings", venue.id, {"name": venue.name},
        )
        logging.info(f"Venue {venue.name} created")
        return doc

    async def update_venue(self, venue_id: str, data: VenueUpdate, current_user: Dict):
        update_data = data.model_dump(exclude_none=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="Nothing to update")

        if "name" in update_data:
            clash = await self.room_repo.find_venue_by_name(update_data["name"])
            if clash and clash["id"] != venue_id:
                raise HTTPException(status_code=400, detail="A venue with this name already exists")

        update_data["updated_at"] = datetime.now(timezone.utc)
        venue = await self.room_repo.update_venue(venue_id, update_data)
        if not venue:
            raise HTTPException(status_code=404, detail="Venue not found")

        await self.audit_service.log_business_action(
            current_user, "venue_updated", "settings", venue_id,
            {"fields": sorted(k for k in update_data if k != "updated_at")},
        )
        return venue

    async def delete_venue(self, venue_id: str, current_user: Dict):
        if not await self.room_repo.delete_venue(venue_id):
            raise HTTPException(status_code=404, detail="Venue not found")
        await self.audit_service.log_business_action(
            current_user, "venue_deleted", "settings", venue_id, {},
        )
        return {"message": "Venue deleted successfully"}

    async def list_room_types(self):
        return await self.room_repo.find_room_types()

    async def get_room_type(self, room_type_id: str):
        room_type = await self.room_repo.find_room_type_by_id(room_type_id)
        if not room_type:
            raise HTTPException(status_code=404, detail="Room type not found")
        return room_type

    async def create_room_type(self, data: RoomTypeCreate, current_user: Dict):
        room_type = RoomType(**data.model_dump())
        doc = room_type.model_dump()
        await self.room_repo.add_room_type(doc)
        doc.pop("_id", None)

        await self.audit_service.log_business_action(
            current_user, "room_type_created", "settings", room_type.id, {"name": room_type.name},
        )
        return doc

    async def update_room_type(self, room_type_id: str, data: RoomTypeUpdate, current_user: Dict):
        update_data = data.model_dump(exclude_none=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="Nothing to update")
        update_data["updated_at"] = datetime.now(timezone.utc)

        room_type = await self.room_repo.update_room_type(room_type_id, update_data)
        if not room_type:
            raise HTTPException(status_code=404, detail="Room type not found")

        await self.audit_service.log_business_action(
            current_user, "room_type_updated", "settings", room_type_id,
            {"fields": sorted(k for k in update_data if k != "updated_at")},
        )
        return room_type

    async def delete_room_type(self, room_type_id: str, current_user: Dict):
        if not await self.room_repo.delete_room_type(room_type_id):
            raise HTTPException(status_code=404, detail="Room type not found")
        await self.audit_service.log_business_action(
            current_user, "room_type_deleted", "settings", room_type_id, {},
        )
        return {"message": "Room type deleted successfully"}
