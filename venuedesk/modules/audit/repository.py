from venuedesk.core.database import mongodb
from venuedesk.modules.audit.models import AuditLog

class AuditRepository:
    async def add_log(self, log: AuditLog):
        return await mongodb.db.audit_logs.insert_one(log.model_dump())

    async def find_logs(self, query: dict, limit: int = 100):
        return await mongodb.db.audit_logs.find(query, {"_id": 0}).sort("created_at", -1).to_list(limit)
