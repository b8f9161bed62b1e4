from fastapi import Depends, Request
from venuedesk.core.session_sync import SessionSync
from venuedesk.modules.users.repository import UserRepository
from venuedesk.modules.auth.service import AuthService

def get_session_sync(request: Request) -> SessionSync:
    return request.app.state.session_sync

def get_auth_service(
    user_repo: UserRepository = Depends(),
    session_sync: SessionSync = Depends(get_session_sync),
) -> AuthService:
    return AuthService(
        user_repo=user_repo,
        session_sync=session_sync,
    )
