from typing import Optional
from venuedesk.core.database import mongodb

class ReportRepository:
    async def count_enquiries(self, query: dict) -> int:
        return await mongodb.db.enquiries.count_documents(query)

    async def count_bookings(self, query: dict) -> int:
        return await mongodb.db.bookings.count_documents(query)

    async def sum_booking_revenue(self, query: dict) -> float:
        pipeline = [
            {"$match": query},
            {"$group": {"_id": None, "total": {"$sum": "$total_amount"}}},
        ]
        result = await mongodb.db.bookings.aggregate(pipeline).to_list(1)
        return result[0]["total"] if result else 0

    async def find_enquiries(self, query: dict, projection: Optional[dict] = None):
        fields = {"_id": 0, **(projection or {})}
        return await mongodb.db.enquiries.find(query, fields).to_list(None)

    async def find_bookings(self, query: dict, projection: Optional[dict] = None):
        fields = {"_id": 0, **(projection or {})}
        return await mongodb.db.bookings.find(query, fields).to_list(None)

    async def find_follow_ups(self, query: dict):
        return await mongodb.db.follow_up_history.find(query, {"_id": 0}).to_list(None)

    async def find_active_users(self):
        return await mongodb.db.users.find(
            {"status": {"$ne": "inactive"}},
            {"_id": 0, "id": 1, "first_name": 1, "last_name": 1, "email": 1, "role": 1},
        ).to_list(None)
