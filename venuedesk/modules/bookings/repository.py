from datetime import datetime, timezone, timedelta
from typing import Iterable, List
import logging
from pymongo import ReturnDocument, DESCENDING
from pymongo.errors import DuplicateKeyError
from venuedesk.core.config import VENUE_LOCK_TTL_SECONDS
from venuedesk.core.database import mongodb, next_sequence
from venuedesk.modules.bookings.models import INACTIVE_BOOKING_STATUSES

class BookingRepository:
    async def next_booking_sequence(self, year: int) -> int:
        return await next_sequence(f"bookings:{year}")

    async def add_booking(self, booking_doc: dict):
        return await mongodb.db.bookings.insert_one(booking_doc)

    async def find_booking_by_id(self, booking_id: str):
        return await mongodb.db.bookings.find_one({"id": booking_id}, {"_id": 0})

    async def find_bookings(self, query: dict, skip: int = 0, limit: int = 1000):
        cursor = mongodb.db.bookings.find(query, {"_id": 0}).sort("event_date", DESCENDING)
        return await cursor.skip(skip).to_list(limit)

    async def count_bookings(self, query: dict) -> int:
        return await mongodb.db.bookings.count_documents(query)

    async def find_active_bookings_for_venue(self, venue: str):
        """Bookings still holding ``venue`` through a session or the legacy hall field."""
        query = {
            "$or": [{"sessions.venue": venue}, {"hall": venue}],
            "status": {"$nin": INACTIVE_BOOKING_STATUSES},
        }
        return await mongodb.db.bookings.find(query, {"_id": 0}).to_list(None)

    async def find_bookings_by_status(self, statuses: List[str]):
        return await mongodb.db.bookings.find({"status": {"$in": statuses}}, {"_id": 0}).to_list(None)

    async def update_booking(self, booking_id: str, update_data: dict):
        return await mongodb.db.bookings.find_one_and_update(
            {"id": booking_id},
            {"$set": update_data},
            projection={"_id": 0},
            return_document=ReturnDocument.AFTER,
        )

    async def unlink_enquiry(self, enquiry_id: str) -> int:
        result = await mongodb.db.bookings.update_many(
            {"enquiry_id": enquiry_id}, {"$set": {"enquiry_id": None}}
        )
        return result.modified_count

    async def acquire_venue_locks(self, keys: Iterable[str], owner: str) -> bool:
        """
        Take every ``venue|date`` lock in ``keys`` or none of them.

        Keys are taken in sorted order so two writers over overlapping days
        cannot each hold half. A lock past its ``expires_at`` is taken over
        without waiting for the TTL monitor to remove it. Returns False when
        another writer holds a live one.
        """
        now = datetime.now(timezone.utc)
        expires_at = now + timedelta(seconds=VENUE_LOCK_TTL_SECONDS)
        acquired = []
        for key in sorted(set(keys)):
            try:
                await mongodb.db.venue_locks.insert_one(
                    {"_id": key, "owner": owner, "expires_at": expires_at}
                )
            except DuplicateKeyError:
                taken_over = await mongodb.db.venue_locks.find_one_and_update(
                    {"_id": key, "expires_at": {"$lt": now}},
                    {"$set": {"owner": owner, "expires_at": expires_at}},
                )
                if taken_over is not None:
                    logging.info(f"Venue lock {key} expired, taken over")
                    acquired.append(key)
                    continue
                logging.info(f"Venue lock {key} is held by another writer")
                await self.release_venue_locks(acquired, owner)
                return False
            acquired.append(key)
        return True

    async def release_venue_locks(self, keys: Iterable[str], owner: str):
        keys = list(keys)
        if keys:
            await mongodb.db.venue_locks.delete_many({"_id": {"$in": keys}, "owner": owner})
