from pymongo import ReturnDocument
from venuedesk.core.database import mongodb
from venuedesk.modules.settings.models import SYSTEM_SETTINGS_ID

class SettingsRepository:
    async def find_settings(self):
        return await mongodb.db.system_settings.find_one({"id": SYSTEM_SETTINGS_ID}, {"_id": 0})

    async def upsert_settings(self, update_data: dict):
        return await mongodb.db.system_settings.find_one_and_update(
            {"id": SYSTEM_SETTINGS_ID},
            {"$set": update_data},
            projection={"_id": 0},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
