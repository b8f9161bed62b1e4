from typing import List, Optional
from pymongo import ReturnDocument, DESCENDING, ASCENDING
from venuedesk.core.database import mongodb, next_sequence

class EnquiryRepository:
    async def next_enquiry_sequence(self, year: int, month: int) -> int:
        return await next_sequence(f"enquiries:{year}-{month:02d}")

    async def add_enquiry(self, enquiry_doc: dict):
        return await mongodb.db.enquiries.insert_one(enquiry_doc)

    async def find_enquiry_by_id(self, enquiry_id: str):
        return await mongodb.db.enquiries.find_one({"id": enquiry_id}, {"_id": 0})

    async def find_enquiry_by_number(self, enquiry_number: str):
        return await mongodb.db.enquiries.find_one({"enquiry_number": enquiry_number}, {"_id": 0})

    async def find_enquiries(self, query: dict, skip: int = 0, limit: int = 1000):
        cursor = mongodb.db.enquiries.find(query, {"_id": 0}).sort("created_at", DESCENDING)
        return await cursor.skip(skip).to_list(limit)

    async def count_enquiries(self, query: dict) -> int:
        return await mongodb.db.enquiries.count_documents(query)

    async def find_enquiries_by_status(self, statuses: List[str]):
        return await mongodb.db.enquiries.find({"status": {"$in": statuses}}, {"_id": 0}).to_list(None)

    async def find_latest_by_contact(self, contact_number: str):
        return await mongodb.db.enquiries.find_one(
            {"contact_number": contact_number},
            {"_id": 0},
            sort=[("created_at", DESCENDING)],
        )

    async def update_enquiry(self, enquiry_id: str, update_data: dict, push: Optional[dict] = None):
        update = {"$set": update_data}
        if push:
            update["$push"] = push
        return await mongodb.db.enquiries.find_one_and_update(
            {"id": enquiry_id},
            update,
            projection={"_id": 0},
            return_document=ReturnDocument.AFTER,
        )

    async def claim_enquiry(self, enquiry_id: str, update_data: dict):
        """Assign only while nobody else holds the enquiry; None when the race is lost."""
        return await mongodb.db.enquiries.find_one_and_update(
            {
                "id": enquiry_id,
                "$or": [
                    {"assignment_status": {"$ne": "assigned"}},
                    {"salesperson_id": None},
                ],
            },
            {"$set": update_data},
            projection={"_id": 0},
            return_document=ReturnDocument.AFTER,
        )

    async def delete_enquiry(self, enquiry_id: str) -> bool:
        result = await mongodb.db.enquiries.delete_one({"id": enquiry_id})
        return result.deleted_count > 0

    async def delete_quotations_for_enquiry(self, enquiry_id: str) -> int:
        result = await mongodb.db.quotations.delete_many({"enquiry_id": enquiry_id})
        return result.deleted_count

    async def add_follow_up(self, follow_up_doc: dict):
        return await mongodb.db.follow_up_history.insert_one(follow_up_doc)

    async def find_follow_ups(self, enquiry_id: str):
        return await mongodb.db.follow_up_history.find(
            {"enquiry_id": enquiry_id}, {"_id": 0}
        ).sort("follow_up_date", ASCENDING).to_list(None)

    async def find_pending_follow_ups(self, enquiry_ids: Optional[List[str]] = None):
        query = {"completed": False}
        if enquiry_ids is not None:
            query["enquiry_id"] = {"$in": enquiry_ids}
        return await mongodb.db.follow_up_history.find(query, {"_id": 0}).sort(
            "follow_up_date", ASCENDING
        ).to_list(1000)

    async def update_follow_up(self, follow_up_id: str, update_data: dict):
        return await mongodb.db.follow_up_history.find_one_and_update(
            {"id": follow_up_id},
            {"$set": update_data},
            projection={"_id": 0},
            return_document=ReturnDocument.AFTER,
        )

    async def complete_follow_ups_for_enquiry(self, enquiry_id: str, update_data: dict) -> int:
        result = await mongodb.db.follow_up_history.update_many(
            {"enquiry_id": enquiry_id, "completed": False}, {"$set": update_data}
        )
        return result.modified_count

    async def delete_follow_ups_for_enquiry(self, enquiry_id: str) -> int:
        result = await mongodb.db.follow_up_history.delete_many({"enquiry_id": enquiry_id})
        return result.deleted_count
