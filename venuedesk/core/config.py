from pathlib import Path
from dotenv import load_dotenv
import os


ROOT_DIR = Path(__file__).resolve().parent.parent.parent

load_dotenv(ROOT_DIR / ".env")

MONGODB_URL = os.getenv("MONGODB_URL", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("DATABASE_NAME", "venuedesk_db")

JWT_SECRET = os.getenv("JWT_SECRET", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRY_HOURS = int(os.getenv("JWT_EXPIRY_HOURS", "24"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DEFAULT_MAX_DISCOUNT_PERCENTAGE = float(os.getenv("DEFAULT_MAX_DISCOUNT_PERCENTAGE", "10"))
QUOTATION_VALIDITY_DAYS = int(os.getenv("QUOTATION_VALIDITY_DAYS", "30"))

# Venue-day locks older than this are reaped by the TTL index
VENUE_LOCK_TTL_SECONDS = int(os.getenv("VENUE_LOCK_TTL_SECONDS", "30"))
