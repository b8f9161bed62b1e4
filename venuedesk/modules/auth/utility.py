from fastapi import Depends, HTTPException, Request
from typing import Dict
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import bcrypt
import jwt
import logging
from datetime import datetime, timezone, timedelta
from venuedesk.modules.users.repository import UserRepository
from venuedesk.core.config import JWT_ALGORITHM, JWT_EXPIRY_HOURS, JWT_SECRET

security = HTTPBearer()

def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

def verify_password(password: str, hashed: str) -> bool:
    return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('utf-8'))

def create_token(user_id: str, role: str) -> str:
    payload = {
        "sub": user_id,
        "role": role,
        "exp": datetime.now(timezone.utc) + timedelta(hours=JWT_EXPIRY_HOURS)
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)

async def _session_invalid(request: Request, user_id=None):
    session_sync = getattr(request.app.state, "session_sync", None)
    if session_sync is not None:
        await session_sync.notify_session_invalid(user_id)

async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
    user_repo: UserRepository = Depends(),
) -> Dict:
    try:
        payload = jwt.decode(credentials.credentials, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        await _session_invalid(request)
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        await _session_invalid(request)
        raise HTTPException(status_code=401, detail="Invalid token")

    user = await user_repo.find_user_by_id(payload["sub"])
    if not user:
        await _session_invalid(request, payload["sub"])
        raise HTTPException(status_code=401, detail="User not found")
    if user.get("status") == "inactive":
        await _session_invalid(request, payload["sub"])
        raise HTTPException(status_code=401, detail="Account is inactive")

    logging.debug(f"Authenticated {user.get('email')} as {user.get('role')}")
    return user
