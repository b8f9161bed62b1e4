from pymongo import ReturnDocument
from venuedesk.core.database import mongodb

class RoomRepository:
    async def find_venues(self):
        return await mongodb.db.venues.find({}, {"_id": 0}).sort("name", 1).to_list(200)

    async def find_venue_by_id(self, venue_id: str):
        return await mongodb.db.venues.find_one({"id": venue_id}, {"_id": 0})

    async def find_venue_by_name(self, name: str):
        return await mongodb.db.venues.find_one({"name": name}, {"_id": 0})

    async def add_venue(self, venue_doc: dict):
        return await mongodb.db.venues.insert_one(venue_doc)

    async def update_venue(self, venue_id: str, update_data: dict):
        return await mongodb.db.venues.find_one_and_update(
            {"id": venue_id},
            {"$set": update_data},
            projection={"_id": 0},
            return_document=ReturnDocument.AFTER,
        )

    async def delete_venue(self, venue_id: str) -> bool:
        result = await mongodb.db.venues.delete_one({"id": venue_id})
        return result.deleted_count > 0

    async def find_room_types(self):
        return await mongodb.db.room_types.find({}, {"_id": 0}).sort("base_rate", 1).to_list(200)

    async def find_room_type_by_id(self, room_type_id: str):
        return await mongodb.db.room_types.find_one({"id": room_type_id}, {"_id": 0})

    async def add_room_type(self, room_type_doc: dict):
        return await mongodb.db.room_types.insert_one(room_type_doc)

    async def update_room_type(self, room_type_id: str, update_data: dict):
        return await mongodb.db.room_types.find_one_and_update(
            {"id": room_type_id},
            {"$set": update_data},
            projection={"_id": 0},
            return_document=ReturnDocument.AFTER,
        )

    async def delete_room_type(self, room_type_id: str) -> bool:
        result = await mongodb.db.room_types.delete_one({"id": room_type_id})
        return result.deleted_count > 0
