from venuedesk.core.database import mongodb
from pymongo import ReturnDocument
from venuedesk.modules.users.models import User

class UserRepository:
    async def user_exists(self, email: str) -> bool:
        return await mongodb.db.users.find_one({"email": email}) is not None

    async def create_user(self, user: User) -> dict:
        data = user.model_dump()
        await mongodb.db.users.insert_one(data)
        data.pop("_id", None)
        return data

    async def find_user(self, email: str) -> dict:
        return await mongodb.db.users.find_one({"email": email}, {"_id": 0})

    async def find_user_by_id(self, id: str) -> dict:
        return await mongodb.db.users.find_one({"id": id}, {"_id": 0})

    async def find_users(self, query: dict):
        return await mongodb.db.users.find(query, {"_id": 0, "hashed_password": 0}).sort("first_name", 1).to_list(500)

    async def update_user_by_id(self, id: str, data: dict):
        return await mongodb.db.users.find_one_and_update(
            {"id": id},
            {"$set": data},
            projection={"_id": 0},
            return_document=ReturnDocument.AFTER,
        )

    async def delete_user(self, id: str) -> bool:
        result = await mongodb.db.users.delete_one({"id": id})
        return result.deleted_count > 0

    async def find_role(self, name: str) -> dict:
        return await mongodb.db.roles.find_one({"name": name}, {"_id": 0})

    async def find_roles(self):
        return await mongodb.db.roles.find({}, {"_id": 0}).to_list(50)
