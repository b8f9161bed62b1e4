import logging
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from venuedesk.core.config import MONGODB_URL, DATABASE_NAME

class MongoDB:
    client: AsyncIOMotorClient = None
    db = None

mongodb = MongoDB()

async def connect_to_mongo():
    mongodb.client = AsyncIOMotorClient(MONGODB_URL)
    mongodb.db = mongodb.client[DATABASE_NAME]

    # Test connection
    await mongodb.client.admin.command("ping")
    logging.info("✅ MongoDB connected")

async def close_mongo_connection():
    if mongodb.client is not None:
        mongodb.client.close()
    logging.info("🔌 MongoDB disconnected")

async def ensure_indexes():
    db = mongodb.db
    for collection in ("users", "roles", "enquiries", "bookings", "quotations",
                       "quotation_packages", "venues", "room_types", "menu_packages",
                       "menu_items", "additional_items", "follow_up_history", "system_settings"):
        await db[collection].create_index([("id", ASCENDING)], unique=True)

    await db.users.create_index([("email", ASCENDING)], unique=True)
    await db.roles.create_index([("name", ASCENDING)], unique=True)
    await db.venues.create_index([("name", ASCENDING)], unique=True)
    await db.enquiries.create_index([("enquiry_number", ASCENDING)], unique=True)
    await db.enquiries.create_index([("status", ASCENDING), ("salesperson_id", ASCENDING)])
    await db.bookings.create_index([("booking_number", ASCENDING)], unique=True)
    await db.bookings.create_index([("sessions.venue", ASCENDING), ("status", ASCENDING)])
    await db.bookings.create_index([("hall", ASCENDING), ("status", ASCENDING)])
    await db.quotations.create_index([("quotation_number", ASCENDING)], unique=True)
    await db.quotations.create_index([("enquiry_id", ASCENDING), ("version", DESCENDING)])
    await db.follow_up_history.create_index([("enquiry_id", ASCENDING), ("follow_up_date", ASCENDING)])
    await db.audit_logs.create_index([("created_at", DESCENDING)])

    # Mongo removes a lock once its expires_at has passed
    await db.venue_locks.create_index([("expires_at", ASCENDING)], expireAfterSeconds=0)
    logging.info("📇 MongoDB indexes ensured")

async def next_sequence(key: str) -> int:
    """Atomically bump and return the counter stored under ``key``."""
    counter = await mongodb.db.counters.find_one_and_update(
        {"_id": key},
        {"$inc": {"seq": 1}},
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )
    return counter["seq"]
