import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager
from venuedesk.core.config import LOG_LEVEL
from venuedesk.core.database import connect_to_mongo, close_mongo_connection, ensure_indexes
from venuedesk.core.session_sync import SessionSync
from venuedesk.modules.audit.repository import AuditRepository
from venuedesk.modules.audit.router import audit_router
from venuedesk.modules.audit.service import AuditService
from venuedesk.modules.auth.router import auth_router
from venuedesk.modules.bookings.router import booking_router
from venuedesk.modules.enquiries.router import enquiry_router, follow_up_router, public_enquiry_router
from venuedesk.modules.menus.router import menu_router
from venuedesk.modules.quotations.router import quotation_router
from venuedesk.modules.reports.router import report_router
from venuedesk.modules.rooms.router import room_router
from venuedesk.modules.settings.router import settings_router
from venuedesk.modules.users.router import user_router, role_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    await connect_to_mongo()
    await ensure_indexes()
    app.state.session_sync = SessionSync()
    app.state.session_sync.subscribe(AuditService(AuditRepository()).on_session_event)
    logging.info("🔔 Session sync ready")
    yield
    # Shutdown
    app.state.session_sync.close()
    await close_mongo_connection()


app = FastAPI(title="VenueDesk", lifespan=lifespan)


@app.get("/")
async def root():
    return {"message": "VenueDesk API"}


app.include_router(auth_router, prefix="/api")
app.include_router(user_router, prefix="/api")
app.include_router(role_router, prefix="/api")
app.include_router(room_router, prefix="/api")
app.include_router(menu_router, prefix="/api")
app.include_router(enquiry_router, prefix="/api")
app.include_router(follow_up_router, prefix="/api")
app.include_router(public_enquiry_router, prefix="/api")
app.include_router(booking_router, prefix="/api")
app.include_router(quotation_router, prefix="/api")
app.include_router(report_router, prefix="/api")
app.include_router(settings_router, prefix="/api")
app.include_router(audit_router, prefix="/api")
