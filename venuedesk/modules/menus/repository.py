from pymongo import ReturnDocument
from venuedesk.core.database import mongodb

class MenuRepository:
    async def find_packages(self):
        return await mongodb.db.menu_packages.find({}, {"_id": 0}).sort("name", 1).to_list(200)

    async def find_package_by_id(self, package_id: str):
        return await mongodb.db.menu_packages.find_one({"id": package_id}, {"_id": 0})

    async def add_package(self, package_doc: dict):
        return await mongodb.db.menu_packages.insert_one(package_doc)

    async def update_package(self, package_id: str, update_data: dict):
        return await mongodb.db.menu_packages.find_one_and_update(
            {"id": package_id},
            {"$set": update_data},
            projection={"_id": 0},
            return_document=ReturnDocument.AFTER,
        )

    async def delete_package(self, package_id: str) -> bool:
        result = await mongodb.db.menu_packages.delete_one({"id": package_id})
        return result.deleted_count > 0

    async def find_items(self, package_id: str = None):
        query = {"package_id": package_id} if package_id else {}
        return await mongodb.db.menu_items.find(query, {"_id": 0}).sort("name", 1).to_list(1000)

    async def find_item_by_id(self, item_id: str):
        return await mongodb.db.menu_items.find_one({"id": item_id}, {"_id": 0})

    async def add_item(self, item_doc: dict):
        return await mongodb.db.menu_items.insert_one(item_doc)

    async def update_item(self, item_id: str, update_data: dict):
        return await mongodb.db.menu_items.find_one_and_update(
            {"id": item_id},
            {"$set": update_data},
            projection={"_id": 0},
            return_document=ReturnDocument.AFTER,
        )

    async def delete_item(self, item_id: str) -> bool:
        result = await mongodb.db.menu_items.delete_one({"id": item_id})
        return result.deleted_count > 0

    async def delete_items_for_package(self, package_id: str) -> int:
        result = await mongodb.db.menu_items.delete_many({"package_id": package_id})
        return result.deleted_count

    async def find_additional_items(self, active_only: bool = False):
        query = {"is_active": True} if active_only else {}
        return await mongodb.db.additional_items.find(query, {"_id": 0}).sort("name", 1).to_list(500)

    async def find_additional_item_by_id(self, item_id: str):
        return await mongodb.db.additional_items.find_one({"id": item_id}, {"_id": 0})

    async def add_additional_item(self, item_doc: dict):
        return await mongodb.db.additional_items.insert_one(item_doc)

    async def update_additional_item(self, item_id: str, update_data: dict):
        return await mongodb.db.additional_items.find_one_and_update(
            {"id": item_id},
            {"$set": update_data},
            projection={"_id": 0},
            return_document=ReturnDocument.AFTER,
        )

    async def delete_additional_item(self, item_id: str) -> bool:
        result = await mongodb.db.additional_items.delete_one({"id": item_id})
        return result.deleted_count > 0
