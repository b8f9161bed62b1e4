"""
Edit/view permission checks for enquiries and bookings.

User and resource records reach us in several historical shapes (string or
object roles, ``id``/``_id``, three different owner fields). They are
normalized first and the policy table runs on the normalized values only.
"""

from typing import Any, Optional
from venuedesk.modules.users.models import UserRole


def _present(value: Any) -> bool:
    return value is not None and value != ""


def _get(record: Any, *names: str) -> Any:
    """First non-empty value among ``names`` on a mapping or an object."""
    for name in names:
        if isinstance(record, dict):
            value = record.get(name)
        else:
            value = getattr(record, name, None)
        if _present(value):
            return value
    return None


def role_name(user: Any) -> Optional[UserRole]:
    role = _get(user, "role")
    if role is None:
        return None
    if not isinstance(role, str):
        role = _get(role, "name")
    if isinstance(role, UserRole):
        return role
    try:
        return UserRole(role)
    except ValueError:
        return None


def user_id(user: Any) -> Optional[str]:
    value = _get(user, "id", "_id")
    return str(value) if _present(value) else None


def owner_id(resource: Any) -> Optional[str]:
    value = _get(resource, "salesperson_id", "salespersonId", "created_by", "createdBy")
    if not _present(value):
        value = _get(_get(resource, "salesperson"), "id")
    return str(value) if _present(value) else None


def can_view_resource(user: Any) -> bool:
    return bool(user)


def can_edit_resource(user: Any, resource: Any) -> bool:
    if not user or not resource:
        return False

    role = role_name(user)

    if role == UserRole.staff:
        return False
    if role == UserRole.admin:
        return True
    if role in (UserRole.salesperson, UserRole.manager):
        uid = user_id(user)
        owner = owner_id(resource)
        return uid is not None and owner is not None and owner == uid
    return False
