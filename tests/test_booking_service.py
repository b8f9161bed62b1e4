import asyncio
from datetime import datetime, timezone

import pytest
from fastapi import HTTPException

from fakes import FakeBookingRepo, FakeEnquiryRepo, make_audit_service
from venuedesk.modules.bookings.models import BookingStatus, EventSession
from venuedesk.modules.bookings.schemas import BookingCreate, BookingUpdate
from venuedesk.modules.bookings.service import BookingService, format_booking_number, venue_lock_keys

SALES = {"id": "u1", "role": "salesperson", "email": "sales@example.com"}
ADMIN = {"id": "a1", "role": "admin"}


def _session(**overrides):
    fields = {
        "session_name": "Reception",
        "venue": "Grand Hall",
        "start_time": "18:00",
        "end_time": "23:00",
        "session_date": datetime(2025, 2, 14, tzinfo=timezone.utc),
    }
    fields.update(overrides)
    return fields


def _create(**overrides):
    fields = {
        "client_name": "Mehta Family",
        "contact_number": "9876543210",
        "event_type": "wedding",
        "event_date": datetime(2025, 2, 14, tzinfo=timezone.utc),
        "confirmed_pax": 250,
        "total_amount": 500000,
        "advance_amount": 100000,
        "sessions": [_session()],
    }
    fields.update(overrides)
    return BookingCreate(**fields)


def _service(bookings=None, enquiries=None):
    booking_repo = FakeBookingRepo(bookings)
    enquiry_repo = FakeEnquiryRepo(enquiries)
    audit_service, audit_repo = make_audit_service()
    service = BookingService(booking_repo, enquiry_repo, audit_service)
    return service, booking_repo, enquiry_repo, audit_repo


def _existing(booking_id="b1", status="booked", **session_overrides):
    return {
        "id": booking_id,
        "booking_number": "BKG-2025-001",
        "client_name": "Sharma Wedding",
        "status": status,
        "salesperson_id": "u1",
        "total_amount": 1000,
        "advance_amount": 200,
        "sessions": [_session(**session_overrides)],
    }


def test_booking_number_format():
    assert format_booking_number(2025, 7) == "BKG-2025-007"
    assert format_booking_number(2025, 1234) == "BKG-2025-1234"


def test_lock_keys_are_sorted_and_unique_per_venue_day():
    sessions = [
        EventSession(**_session(venue="Lawn")),
        EventSession(**_session(start_time="08:00", end_time="10:00")),
        EventSession(**_session()),
    ]

    assert venue_lock_keys(sessions) == ["Grand Hall|2025-02-14", "Lawn|2025-02-14"]


def test_create_booking_computes_balance_and_number():
    service, booking_repo, _, audit_repo = _service()

    booking = asyncio.run(service.create_booking(_create(), SALES))

    assert booking["balance_amount"] == 400000
    assert booking["booking_number"].startswith("BKG-")
    assert booking["booking_number"].endswith("-001")
    assert booking["created_by"] == "u1"
    assert booking["id"] in booking_repo.bookings
    assert booking_repo.locks == {}
    assert "booking_created" in audit_repo.actions()


def test_create_booking_rejects_overlap_with_409():
    service, booking_repo, _, _ = _service(bookings=[_existing()])

    with pytest.raises(HTTPException) as exc:
        asyncio.run(service.create_booking(_create(sessions=[_session(start_time="20:00", end_time="22:00")]), SALES))

    assert exc.value.status_code == 409
    assert exc.value.detail["message"] == "Venue conflict detected"
    assert exc.value.detail["conflicts"][0]["conflicting_booking"]["id"] == "b1"
    assert len(booking_repo.bookings) == 1
    assert booking_repo.locks == {}


def test_cancelled_booking_does_not_block():
    service, booking_repo, _, _ = _service(bookings=[_existing(status="cancelled")])

    asyncio.run(service.create_booking(_create(), SALES))

    assert len(booking_repo.bookings) == 2


def test_stored_session_without_times_does_not_block():
    incomplete = _existing(start_time=None, end_time=None)
    service, booking_repo, _, _ = _service(bookings=[incomplete])

    asyncio.run(service.create_booking(_create(), SALES))

    assert len(booking_repo.bookings) == 2


def test_held_venue_lock_rejects_with_409():
    service, booking_repo, _, _ = _service()
    booking_repo.locks["Grand Hall|2025-02-14"] = "another-writer"

    with pytest.raises(HTTPException) as exc:
        asyncio.run(service.create_booking(_create(), SALES))

    assert exc.value.status_code == 409
    assert exc.value.detail == "Venue is being booked by another user, please retry"
    assert booking_repo.bookings == {}
    assert booking_repo.locks == {"Grand Hall|2025-02-14": "another-writer"}


def test_create_booking_moves_enquiry_to_booked_and_inherits_owner():
    enquiry = {
        "id": "e1",
        "enquiry_number": "ENQ-2025-01-001",
        "status": "converted",
        "salesperson_id": "u7",
        "status_history": [],
    }
    service, _, enquiry_repo, _ = _service(enquiries=[enquiry])

    booking = asyncio.run(service.create_booking(_create(enquiry_id="e1"), SALES))

    assert booking["salesperson_id"] == "u7"
    assert booking["enquiry_number"] == "ENQ-2025-01-001"
    stored = enquiry_repo.enquiries["e1"]
    assert stored["status"] == "booked"
    assert stored["status_history"][-1]["note"] == f"Booking {booking['booking_number']} created"


def test_create_booking_with_unknown_enquiry_is_404():
    service, _, _, _ = _service()

    with pytest.raises(HTTPException) as exc:
        asyncio.run(service.create_booking(_create(enquiry_id="missing"), SALES))

    assert exc.value.status_code == 404


def test_update_status_of_cancelled_booking_is_rejected():
    service, _, _, _ = _service(bookings=[_existing(status="cancelled")])

    with pytest.raises(HTTPException) as exc:
        asyncio.run(service.update_booking("b1", BookingUpdate(status=BookingStatus.booked), ADMIN))

    assert exc.value.status_code == 400
    assert exc.value.detail.startswith("Cannot update status: Booking is already cancelled.")


def test_update_by_non_owner_is_forbidden():
    service, _, _, _ = _service(bookings=[_existing()])

    with pytest.raises(HTTPException) as exc:
        asyncio.run(service.update_booking("b1", BookingUpdate(notes="x"), {"id": "u2", "role": "salesperson"}))

    assert exc.value.status_code == 403


def test_update_recomputes_balance():
    service, _, _, _ = _service(bookings=[_existing()])

    booking = asyncio.run(service.update_booking("b1", BookingUpdate(advance_amount=600), SALES))

    assert booking["balance_amount"] == 400


def test_update_rejects_advance_above_total():
    service, _, _, _ = _service(bookings=[_existing()])

    with pytest.raises(HTTPException) as exc:
        asyncio.run(service.update_booking("b1", BookingUpdate(advance_amount=5000), SALES))

    assert exc.value.status_code == 400


def test_update_sessions_ignores_the_booking_itself():
    service, booking_repo, _, _ = _service(bookings=[_existing()])

    update = BookingUpdate(sessions=[EventSession(**_session(start_time="17:00", end_time="22:00"))])
    booking = asyncio.run(service.update_booking("b1", update, SALES))

    assert booking["sessions"][0]["start_time"] == "17:00"
    assert booking_repo.locks == {}


def test_update_sessions_into_another_booking_is_409():
    other = _existing(booking_id="b2", venue="Lawn")
    service, _, _, _ = _service(bookings=[_existing(), other])

    update = BookingUpdate(sessions=[EventSession(**_session(venue="Lawn"))])
    with pytest.raises(HTTPException) as exc:
        asyncio.run(service.update_booking("b1", update, SALES))

    assert exc.value.status_code == 409


def test_status_change_is_audited():
    service, _, _, audit_repo = _service(bookings=[_existing()])

    asyncio.run(service.update_booking("b1", BookingUpdate(status=BookingStatus.completed), SALES))

    assert audit_repo.actions() == ["booking_updated", "booking_status_changed"]


def test_list_bookings_paginates_when_page_given():
    bookings = [_existing(booking_id=f"b{i}") for i in range(5)]
    service, _, _, _ = _service(bookings=bookings)

    page = asyncio.run(service.list_bookings(page=2, page_size=2))

    assert page.total == 5
    assert len(page.data) == 2
    assert len(asyncio.run(service.list_bookings())) == 5
