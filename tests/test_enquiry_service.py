import asyncio
from datetime import datetime, timezone

import pytest
from fastapi import HTTPException

from fakes import FakeBookingRepo, FakeEnquiryRepo, make_audit_service
from venuedesk.modules.enquiries.models import EnquiryStatus
from venuedesk.modules.enquiries.schemas import (
    EnquiryCreate, EnquiryUpdate, FollowUpCreate, PublicEnquiryCreate,
)
from venuedesk.modules.enquiries.service import (
    EnquiryService, PUBLIC_FORM_CREATOR, check_transition, format_enquiry_number,
)

SALES = {"id": "u1", "role": "salesperson"}
OTHER = {"id": "u2", "role": "salesperson"}
ADMIN = {"id": "a1", "role": "admin"}


def _session(**overrides):
    fields = {
        "session_name": "Lunch",
        "venue": "Grand Hall",
        "start_time": "12:00",
        "end_time": "15:00",
        "session_date": "2025-03-01T00:00:00",
    }
    fields.update(overrides)
    return fields


def _create(**overrides):
    fields = {
        "client_name": "Rao Corp",
        "contact_number": "9000000001",
        "event_type": "conference",
        "event_date": datetime(2025, 3, 1, tzinfo=timezone.utc),
        "expected_pax": 120,
    }
    fields.update(overrides)
    return EnquiryCreate(**fields)


def _enquiry(enquiry_id="e1", status="new", **overrides):
    enquiry = {
        "id": enquiry_id,
        "enquiry_number": f"ENQ-2025-03-{enquiry_id}",
        "client_name": "Rao Corp",
        "contact_number": "9000000001",
        "event_type": "conference",
        "event_date": datetime(2025, 3, 1, tzinfo=timezone.utc),
        "status": status,
        "salesperson_id": "u1",
        "assignment_status": "assigned",
        "status_history": [],
        "sessions": [],
        "created_at": datetime(2025, 1, 1, tzinfo=timezone.utc),
    }
    enquiry.update(overrides)
    return enquiry


def _service(enquiries=None, bookings=None):
    enquiry_repo = FakeEnquiryRepo(enquiries)
    booking_repo = FakeBookingRepo(bookings)
    audit_service, audit_repo = make_audit_service()
    return EnquiryService(enquiry_repo, booking_repo, audit_service), enquiry_repo, booking_repo, audit_repo


def test_enquiry_number_format():
    assert format_enquiry_number(datetime(2025, 3, 9), 4) == "ENQ-2025-03-004"


def test_allowed_and_forbidden_transitions():
    check_transition(EnquiryStatus.new, EnquiryStatus.quotation_sent, None)
    check_transition(EnquiryStatus.converted, EnquiryStatus.booked, None)

    with pytest.raises(HTTPException) as exc:
        check_transition(EnquiryStatus.new, EnquiryStatus.booked, None)
    assert exc.value.detail == "Invalid status transition from new to booked"

    with pytest.raises(HTTPException):
        check_transition(EnquiryStatus.lost, EnquiryStatus.new, None)


def test_lost_requires_reason():
    with pytest.raises(HTTPException) as exc:
        check_transition(EnquiryStatus.ongoing, EnquiryStatus.lost, None)
    assert exc.value.status_code == 400

    check_transition(EnquiryStatus.ongoing, EnquiryStatus.lost, "budget")


def test_create_numbers_sequentially_and_defaults_owner():
    service, enquiry_repo, _, audit_repo = _service()

    first = asyncio.run(service.create_enquiry(_create(), SALES))
    second = asyncio.run(service.create_enquiry(_create(), SALES))

    assert first["enquiry_number"].endswith("-001")
    assert second["enquiry_number"].endswith("-002")
    assert first["salesperson_id"] == "u1"
    assert first["status"] == EnquiryStatus.new
    assert first["status_history"][0]["to_status"] == EnquiryStatus.new
    assert audit_repo.actions() == ["enquiry_created", "enquiry_created"]
    assert len(enquiry_repo.enquiries) == 2


def test_create_blocked_by_booked_booking():
    booking = {"id": "b1", "client_name": "X", "status": "booked", "sessions": [_session(start_time="14:00", end_time="18:00")]}
    service, enquiry_repo, _, _ = _service(bookings=[booking])

    with pytest.raises(HTTPException) as exc:
        asyncio.run(service.create_enquiry(_create(sessions=[_session()]), SALES))

    assert exc.value.status_code == 409
    assert exc.value.detail == "Venue collision with existing converted/booked record. Creation blocked."
    assert enquiry_repo.enquiries == {}


def test_create_blocked_by_converted_enquiry():
    converted = _enquiry(status="converted", sessions=[_session()])
    service, _, _, _ = _service(enquiries=[converted])

    with pytest.raises(HTTPException) as exc:
        asyncio.run(service.create_enquiry(_create(sessions=[_session(start_time="13:00")]), SALES))

    assert exc.value.status_code == 409


def test_booked_session_without_times_does_not_block_creation():
    booking = {
        "id": "b1", "client_name": "X", "status": "booked",
        "sessions": [{"session_name": "Old", "venue": "Grand Hall", "session_date": "2025-03-01T00:00:00"}],
    }
    service, enquiry_repo, _, _ = _service(bookings=[booking])

    asyncio.run(service.create_enquiry(_create(sessions=[_session()]), SALES))

    assert len(enquiry_repo.enquiries) == 1


def test_ongoing_enquiry_does_not_block():
    ongoing = _enquiry(status="ongoing", sessions=[_session()])
    service, enquiry_repo, _, _ = _service(enquiries=[ongoing])

    asyncio.run(service.create_enquiry(_create(sessions=[_session()]), SALES))

    assert len(enquiry_repo.enquiries) == 2


def test_update_status_records_history():
    service, enquiry_repo, _, audit_repo = _service(enquiries=[_enquiry()])

    updated = asyncio.run(service.update_enquiry("e1", EnquiryUpdate(status=EnquiryStatus.quotation_sent), SALES))

    assert updated["status"] == "quotation_sent"
    assert enquiry_repo.enquiries["e1"]["status_history"][-1]["from_status"] == EnquiryStatus.new
    assert audit_repo.actions() == ["enquiry_updated", "enquiry_status_changed"]


def test_update_invalid_transition_is_400():
    service, _, _, _ = _service(enquiries=[_enquiry()])

    with pytest.raises(HTTPException) as exc:
        asyncio.run(service.update_enquiry("e1", EnquiryUpdate(status=EnquiryStatus.booked), SALES))

    assert exc.value.status_code == 400


def test_update_by_non_owner_is_403():
    service, _, _, _ = _service(enquiries=[_enquiry()])

    with pytest.raises(HTTPException) as exc:
        asyncio.run(service.update_enquiry("e1", EnquiryUpdate(notes="hi"), OTHER))

    assert exc.value.status_code == 403


def test_converted_enquiry_does_not_collide_with_itself():
    service, _, _, _ = _service(enquiries=[_enquiry(status="converted", sessions=[_session()])])

    updated = asyncio.run(service.update_enquiry(
        "e1", EnquiryUpdate(sessions=[_session(end_time="16:00")]), SALES,
    ))

    assert updated["sessions"][0]["end_time"] == "16:00"


def test_claim_and_unclaim():
    service, enquiry_repo, _, _ = _service(enquiries=[_enquiry(salesperson_id=None, assignment_status="unassigned")])

    claimed = asyncio.run(service.claim_enquiry("e1", OTHER))
    assert claimed["data"]["salesperson_id"] == "u2"

    with pytest.raises(HTTPException) as exc:
        asyncio.run(service.claim_enquiry("e1", SALES))
    assert exc.value.status_code == 400
    assert exc.value.detail == "This enquiry is already claimed by another employee"

    with pytest.raises(HTTPException) as exc:
        asyncio.run(service.unclaim_enquiry("e1", SALES))
    assert exc.value.status_code == 403

    asyncio.run(service.unclaim_enquiry("e1", OTHER))
    assert enquiry_repo.enquiries["e1"]["salesperson_id"] is None
    assert enquiry_repo.enquiries["e1"]["assignment_status"] == "unassigned"


def test_list_paginates_only_with_page_and_size():
    service, _, _, _ = _service(enquiries=[_enquiry(enquiry_id=f"e{i}") for i in range(3)])

    assert len(asyncio.run(service.list_enquiries())) == 3
    page = asyncio.run(service.list_enquiries(page=1, page_size=2))
    assert page.total == 3
    assert len(page.data) == 2


def test_list_filters_by_search():
    enquiries = [_enquiry("e1"), _enquiry("e2", client_name="Iyer Family", contact_number="9111111111")]
    service, _, _, _ = _service(enquiries=enquiries)

    found = asyncio.run(service.list_enquiries(search="iyer"))

    assert [e["id"] for e in found] == ["e2"]


def test_delete_cascades():
    booking = {"id": "b1", "enquiry_id": "e1", "status": "booked", "sessions": []}
    service, enquiry_repo, booking_repo, _ = _service(enquiries=[_enquiry()], bookings=[booking])
    asyncio.run(service.add_follow_up("e1", FollowUpCreate(follow_up_date=datetime(2025, 2, 1)), SALES))

    result = asyncio.run(service.delete_enquiry("e1", ADMIN))

    assert result["deleted"] == {"quotations": 0, "bookings_unlinked": 1, "follow_ups": 1}
    assert enquiry_repo.enquiries == {}
    assert booking_repo.bookings["b1"]["enquiry_id"] is None


def test_follow_ups_stats_and_completion():
    service, enquiry_repo, _, _ = _service(enquiries=[_enquiry()])
    first = asyncio.run(service.add_follow_up("e1", FollowUpCreate(follow_up_date=datetime(2025, 2, 1)), SALES))
    asyncio.run(service.add_follow_up("e1", FollowUpCreate(follow_up_date=datetime(2025, 2, 5)), SALES))

    assert enquiry_repo.enquiries["e1"]["follow_up_date"] == datetime(2025, 2, 5)
    asyncio.run(service.complete_follow_up(first["id"], "called", SALES))
    assert asyncio.run(service.follow_up_stats("e1")) == {"total": 2, "completed": 1}
    assert len(asyncio.run(service.list_pending_follow_ups())) == 1

    result = asyncio.run(service.complete_all_follow_ups("e1", SALES))
    assert result["completed"] == 1

    with pytest.raises(HTTPException) as exc:
        asyncio.run(service.complete_follow_up("missing", None, SALES))
    assert exc.value.status_code == 404


def test_search_by_phone():
    service, _, _, _ = _service(enquiries=[_enquiry(email="ops@rao.example", city="Pune")])

    found = asyncio.run(service.search_by_phone("9000000001"))
    missing = asyncio.run(service.search_by_phone("1234567"))

    assert found.found and found.client_name == "Rao Corp" and found.city == "Pune"
    assert not missing.found


def test_public_enquiry_is_unassigned_and_trackable():
    service, enquiry_repo, _, audit_repo = _service()
    data = PublicEnquiryCreate(
        client_name="Walk In",
        contact_number="9222222222",
        event_type="birthday",
        event_date=datetime(2025, 5, 1, tzinfo=timezone.utc),
        expected_pax=40,
    )

    view = asyncio.run(service.create_public_enquiry(data))
    stored = next(iter(enquiry_repo.enquiries.values()))

    assert stored["source"] == "website"
    assert stored["salesperson_id"] is None
    assert stored["created_by"] == PUBLIC_FORM_CREATOR
    assert audit_repo.logs[0].user_id == PUBLIC_FORM_CREATOR
    status = asyncio.run(service.get_public_status(view.enquiry_number))
    assert status.status == EnquiryStatus.new

    with pytest.raises(HTTPException) as exc:
        asyncio.run(service.get_public_status("ENQ-0000-00-000"))
    assert exc.value.status_code == 404
