from fastapi import HTTPException
import logging
from typing import Dict
from venuedesk.core.session_sync import SessionSync
from venuedesk.modules.auth.schemas import TokenResponse
from venuedesk.modules.auth.rbac import resolve_permissions
from venuedesk.modules.auth.utility import create_token, verify_password
from venuedesk.modules.users.repository import UserRepository
from venuedesk.modules.users.schemas import UserLogin, UserResponse, CurrentUserResponse


class AuthService:
    def __init__(self,
                 user_repo: UserRepository,
                 session_sync: SessionSync
                 ):
        self.user_repo = user_repo
        self.session_sync = session_sync

    async def login(self, data: UserLogin) -> TokenResponse:
        user = await self.user_repo.find_user(data.email)
        if not user or not verify_password(data.password, user["hashed_password"]):
            logging.info(f"Failed login attempt for {data.email}")
            raise HTTPException(status_code=401, detail="Invalid credentials")
        if user.get("status") == "inactive":
            raise HTTPException(status_code=401, detail="Account is inactive")

        token = create_token(user["id"], user["role"])
        user_resp = UserResponse(**user)

        await self.session_sync.notify_login(user_resp.model_dump(mode="json"))
        logging.info(f"User {user['email']} logged in")
        return TokenResponse(access_token=token, user=user_resp)

    async def logout(self, current_user: Dict):
        await self.session_sync.notify_logout(current_user["id"])
        return {"message": "Logged out Successfully"}

    async def get_me(self, current_user: Dict) -> CurrentUserResponse:
        permissions = await resolve_permissions(current_user, self.user_repo)
        return CurrentUserResponse(**current_user, permissions=permissions)
