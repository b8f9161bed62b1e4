from fastapi import Depends
from venuedesk.modules.audit.dependencies import get_audit_service
from venuedesk.modules.audit.service import AuditService
from venuedesk.modules.rooms.repository import RoomRepository
from venuedesk.modules.rooms.service import RoomService

def get_room_service(
    room_repo: RoomRepository = Depends(),
    audit_service: AuditService = Depends(get_audit_service),
) -> RoomService:
    return RoomService(room_repo, audit_service)
