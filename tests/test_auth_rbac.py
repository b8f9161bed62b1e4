import asyncio
from typing import Dict

import jwt
import pytest
from fastapi import Depends, FastAPI, HTTPException
from fastapi.testclient import TestClient

from fakes import make_audit_service
from venuedesk.core.config import JWT_ALGORITHM, JWT_SECRET
from venuedesk.core.session_sync import SessionEventType, SessionSync
from venuedesk.modules.audit.dependencies import get_audit_service
from venuedesk.modules.auth.rbac import has_permission, require_permission, require_role, resolve_permissions
from venuedesk.modules.auth.service import AuthService
from venuedesk.modules.auth.utility import create_token, get_current_user, hash_password, verify_password
from venuedesk.modules.users.models import DEFAULT_ROLE_PERMISSIONS, UserRole
from venuedesk.modules.users.repository import UserRepository
from venuedesk.modules.users.schemas import UserLogin


class FakeUserRepo:
    def __init__(self, users=(), roles=None):
        self.users = {u["id"]: u for u in users}
        self.roles = roles or {}

    async def find_user(self, email):
        return next((u for u in self.users.values() if u["email"] == email), None)

    async def find_user_by_id(self, id):
        return self.users.get(id)

    async def find_role(self, name):
        return self.roles.get(name)


def _user(**overrides):
    user = {
        "id": "u1",
        "email": "asha@example.com",
        "first_name": "Asha",
        "role": "salesperson",
        "status": "active",
        "hashed_password": hash_password("secret-pass"),
    }
    user.update(overrides)
    return user


def test_password_hash_round_trip():
    hashed = hash_password("secret-pass")

    assert verify_password("secret-pass", hashed)
    assert not verify_password("wrong", hashed)


def test_token_carries_user_and_role():
    payload = jwt.decode(create_token("u1", "manager"), JWT_SECRET, algorithms=[JWT_ALGORITHM])

    assert payload["sub"] == "u1"
    assert payload["role"] == "manager"


def test_stored_role_overrides_defaults():
    custom = {"reports": {"view": False}}
    repo = FakeUserRepo(roles={"manager": {"name": "manager", "permissions": custom}})

    assert asyncio.run(resolve_permissions({"role": "manager"}, repo)) == custom
    assert asyncio.run(resolve_permissions({"role": "staff"}, repo)) == DEFAULT_ROLE_PERMISSIONS[UserRole.staff]
    assert asyncio.run(resolve_permissions({"role": "intern"}, repo)) == {}


def test_has_permission_requires_explicit_true():
    permissions = {"bookings": {"create": True, "delete": False}}

    assert has_permission(permissions, "bookings", "create")
    assert not has_permission(permissions, "bookings", "delete")
    assert not has_permission(permissions, "reports", "view")


def test_login_publishes_session_event():
    sync = SessionSync()
    events = []
    sync.subscribe(events.append)
    service = AuthService(FakeUserRepo([_user()]), sync)

    response = asyncio.run(service.login(UserLogin(email="asha@example.com", password="secret-pass")))

    assert response.user.id == "u1"
    assert response.token_type == "bearer"
    assert events[0].type == SessionEventType.login


def test_login_rejects_bad_password_and_inactive_accounts():
    service = AuthService(FakeUserRepo([_user(), _user(id="u2", email="gone@example.com", status="inactive")]),
                          SessionSync())

    with pytest.raises(HTTPException) as exc:
        asyncio.run(service.login(UserLogin(email="asha@example.com", password="nope")))
    assert exc.value.status_code == 401

    with pytest.raises(HTTPException) as exc:
        asyncio.run(service.login(UserLogin(email="gone@example.com", password="secret-pass")))
    assert exc.value.detail == "Account is inactive"


def _guarded_app(user: Dict, audit_service):
    app = FastAPI()

    @app.get("/reports")
    async def reports(current_user: Dict = Depends(require_permission("reports", "view"))):
        return {"ok": True}

    @app.get("/admin-only")
    async def admin_only(current_user: Dict = Depends(require_role(UserRole.admin))):
        return {"ok": True}

    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[UserRepository] = lambda: FakeUserRepo()
    app.dependency_overrides[get_audit_service] = lambda: audit_service
    return app


def test_require_permission_allows_and_denies():
    audit_service, audit_repo = make_audit_service()

    allowed = TestClient(_guarded_app({"id": "u1", "role": "salesperson"}, audit_service))
    assert allowed.get("/reports").status_code == 200

    denied = TestClient(_guarded_app({"id": "u2", "role": "staff"}, audit_service))
    response = denied.get("/reports")
    assert response.status_code == 403
    assert response.json()["detail"]["required"] == "reports.view"
    assert audit_repo.logs[-1].action == "access_denied"
    assert audit_repo.logs[-1].details["path"] == "/reports"


def test_require_role():
    audit_service, _ = make_audit_service()

    assert TestClient(_guarded_app({"id": "a1", "role": "admin"}, audit_service)).get("/admin-only").status_code == 200
    response = TestClient(_guarded_app({"id": "m1", "role": "manager"}, audit_service)).get("/admin-only")
    assert response.status_code == 403
    assert response.json()["detail"]["current"] == "manager"


def test_bearer_token_is_resolved_to_user():
    app = FastAPI()
    app.state.session_sync = SessionSync()
    invalidated = []
    app.state.session_sync.subscribe(invalidated.append)

    @app.get("/me")
    async def me(current_user: Dict = Depends(get_current_user)):
        return {"id": current_user["id"]}

    app.dependency_overrides[UserRepository] = lambda: FakeUserRepo([_user()])
    client = TestClient(app)

    token = create_token("u1", "salesperson")
    assert client.get("/me", headers={"Authorization": f"Bearer {token}"}).json() == {"id": "u1"}

    response = client.get("/me", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401
    assert invalidated[-1].type == SessionEventType.session_invalid
