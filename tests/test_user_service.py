import asyncio

import pytest
from fastapi import HTTPException

from fakes import make_audit_service
from venuedesk.modules.auth.utility import verify_password
from venuedesk.modules.users.models import UserRole
from venuedesk.modules.users.schemas import UserCreate
from venuedesk.modules.users.service import UserService

ADMIN = {"id": "a1", "role": "admin"}


class FakeUserRepo:
    def __init__(self):
        self.users = {}
        self.roles = []

    async def user_exists(self, email):
        return any(u["email"] == email for u in self.users.values())

    async def create_user(self, user):
        data = user.model_dump()
        self.users[data["id"]] = data
        return dict(data)

    async def find_user_by_id(self, id):
        return self.users.get(id)

    async def update_user_by_id(self, id, data):
        if id not in self.users:
            return None
        self.users[id].update(data)
        return dict(self.users[id])

    async def delete_user(self, id):
        return self.users.pop(id, None) is not None

    async def find_roles(self):
        return self.roles


def _create(email="ravi@example.com", role=UserRole.salesperson):
    return UserCreate(first_name="Ravi", email=email, password="long-enough", role=role)


def test_create_user_hashes_password_and_rejects_duplicates():
    audit_service, audit_repo = make_audit_service()
    repo = FakeUserRepo()
    service = UserService(repo, audit_service)

    created = asyncio.run(service.create_user(_create(), ADMIN))

    stored = repo.users[created.id]
    assert stored["hashed_password"] != "long-enough"
    assert verify_password("long-enough", stored["hashed_password"])
    assert audit_repo.actions() == ["user_created"]
    with pytest.raises(HTTPException) as exc:
        asyncio.run(service.create_user(_create(), ADMIN))
    assert exc.value.status_code == 400


def test_change_role_is_audited():
    audit_service, audit_repo = make_audit_service()
    service = UserService(FakeUserRepo(), audit_service)
    created = asyncio.run(service.create_user(_create(), ADMIN))

    updated = asyncio.run(service.change_role(created.id, UserRole.manager, ADMIN))

    assert updated.role == UserRole.manager
    assert audit_repo.logs[-1].details["to_role"] == "manager"


def test_admin_cannot_delete_self():
    audit_service, _ = make_audit_service()
    service = UserService(FakeUserRepo(), audit_service)

    with pytest.raises(HTTPException) as exc:
        asyncio.run(service.delete_user("a1", ADMIN))

    assert exc.value.status_code == 400


def test_roles_fall_back_to_defaults():
    audit_service, _ = make_audit_service()
    service = UserService(FakeUserRepo(), audit_service)

    roles = asyncio.run(service.list_roles())

    assert [r["name"] for r in roles] == [r.value for r in UserRole]
    assert roles[0]["permissions"]["settings"]["manage"] is True
