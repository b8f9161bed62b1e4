from typing import Optional
from pymongo import ReturnDocument, DESCENDING
from venuedesk.core.database import mongodb, next_sequence

class QuotationRepository:
    async def next_quotation_sequence(self, day: str) -> int:
        return await next_sequence(f"quotations:{day}")

    async def max_version(self, enquiry_id: str) -> int:
        latest = await mongodb.db.quotations.find_one(
            {"enquiry_id": enquiry_id, "version": {"$type": "number"}},
            {"_id": 0, "version": 1},
            sort=[("version", DESCENDING)],
        )
        return latest["version"] if latest else 0

    async def add_quotation(self, quotation_doc: dict):
        return await mongodb.db.quotations.insert_one(quotation_doc)

    async def find_quotation_by_id(self, quotation_id: str):
        return await mongodb.db.quotations.find_one({"id": quotation_id}, {"_id": 0})

    async def find_quotations(self, query: dict):
        return await mongodb.db.quotations.find(query, {"_id": 0}).sort("created_at", DESCENDING).to_list(1000)

    async def update_quotation(self, quotation_id: str, update_data: dict):
        return await mongodb.db.quotations.find_one_and_update(
            {"id": quotation_id},
            {"$set": update_data},
            projection={"_id": 0},
            return_document=ReturnDocument.AFTER,
        )

    async def delete_quotation(self, quotation_id: str) -> bool:
        result = await mongodb.db.quotations.delete_one({"id": quotation_id})
        return result.deleted_count > 0

    async def find_packages(self, active_only: bool = False):
        query = {"is_active": True} if active_only else {}
        return await mongodb.db.quotation_packages.find(query, {"_id": 0}).sort("name", 1).to_list(200)

    async def find_package_by_id(self, package_id: str):
        return await mongodb.db.quotation_packages.find_one({"id": package_id}, {"_id": 0})

    async def add_package(self, package_doc: dict):
        return await mongodb.db.quotation_packages.insert_one(package_doc)

    async def update_package(self, package_id: str, update_data: dict) -> Optional[dict]:
        return await mongodb.db.quotation_packages.find_one_and_update(
            {"id": package_id},
            {"$set": update_data},
            projection={"_id": 0},
            return_document=ReturnDocument.AFTER,
        )

    async def delete_package(self, package_id: str) -> bool:
        result = await mongodb.db.quotation_packages.delete_one({"id": package_id})
        return result.deleted_count > 0
