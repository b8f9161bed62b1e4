import asyncio
from datetime import datetime, timezone

import pytest
from fastapi import HTTPException

from fakes import FakeEnquiryRepo, FakeQuotationRepo, FakeSettingsRepo, make_audit_service
from venuedesk.modules.quotations.models import QuotationStatus
from venuedesk.modules.quotations.schemas import (
    PricingInput, QuotationCreate, QuotationPackageCreate, QuotationUpdate,
)
from venuedesk.modules.quotations.service import QuotationService, format_quotation_number
from venuedesk.modules.settings.service import SettingsService

SALES = {"id": "u1", "role": "salesperson"}


def _enquiry(**overrides):
    enquiry = {
        "id": "e1",
        "enquiry_number": "ENQ-2025-03-001",
        "client_name": "Rao Corp",
        "email": "ops@rao.example",
        "contact_number": "9000000001",
        "event_type": "conference",
        "event_date": datetime(2025, 3, 1, tzinfo=timezone.utc),
        "expected_pax": 120,
        "status": "new",
        "salesperson_id": "u1",
        "status_history": [],
    }
    enquiry.update(overrides)
    return enquiry


def _service(enquiries=None, max_discount=None):
    enquiry_repo = FakeEnquiryRepo(enquiries if enquiries is not None else [_enquiry()])
    quotation_repo = FakeQuotationRepo()
    audit_service, audit_repo = make_audit_service()
    stored = {"id": "system", "max_discount_percentage": max_discount} if max_discount is not None else None
    settings_service = SettingsService(FakeSettingsRepo(stored), audit_service)
    service = QuotationService(quotation_repo, enquiry_repo, settings_service, audit_service)
    return service, quotation_repo, enquiry_repo, audit_repo


def _create(**overrides):
    fields = {
        "enquiry_id": "e1",
        "venue_rental_items": [{"venue": "Grand Hall", "session": "Dinner", "session_rate": 1000}],
        "include_gst": True,
    }
    fields.update(overrides)
    return QuotationCreate(**fields)


def test_quotation_number_format():
    assert format_quotation_number(datetime(2025, 3, 9), 12) == "QTN-2025-03-09-012"


def test_create_prices_and_copies_client_details():
    service, quotation_repo, _, audit_repo = _service()

    quotation = asyncio.run(service.create_quotation(_create(), SALES))

    assert quotation["grand_total"] == 1180
    assert quotation["totals"]["venue_gst"] == 180
    assert quotation["client_name"] == "Rao Corp"
    assert quotation["client_email"] == "ops@rao.example"
    assert quotation["expected_guests"] == 120
    assert quotation["version"] == 1
    assert quotation["status"] == QuotationStatus.draft
    assert quotation["quotation_number"].endswith("-001")
    assert quotation["valid_until"] > datetime.now(timezone.utc)
    assert audit_repo.actions() == ["quotation_created"]


def test_revisions_increment_version():
    service, _, _, _ = _service()

    first = asyncio.run(service.create_quotation(_create(), SALES))
    second = asyncio.run(service.create_quotation(_create(parent_quotation_id=first["id"]), SALES))

    assert second["version"] == 2
    assert second["parent_quotation_id"] == first["id"]


def test_parent_from_another_enquiry_is_rejected():
    service, _, _, _ = _service(enquiries=[_enquiry(), _enquiry(id="e2", enquiry_number="ENQ-2025-03-002")])
    other = asyncio.run(service.create_quotation(_create(enquiry_id="e2"), SALES))

    with pytest.raises(HTTPException) as exc:
        asyncio.run(service.create_quotation(_create(parent_quotation_id=other["id"]), SALES))

    assert exc.value.status_code == 400


def test_unknown_enquiry_is_404_and_foreign_enquiry_is_403():
    service, _, _, _ = _service()

    with pytest.raises(HTTPException) as exc:
        asyncio.run(service.create_quotation(_create(enquiry_id="nope"), SALES))
    assert exc.value.status_code == 404

    with pytest.raises(HTTPException) as exc:
        asyncio.run(service.create_quotation(_create(), {"id": "u2", "role": "salesperson"}))
    assert exc.value.status_code == 403


def test_discount_over_limit_is_flagged_not_refused():
    service, _, _, _ = _service(max_discount=5)

    quotation = asyncio.run(service.create_quotation(
        _create(discount_type="percentage", discount_value=8), SALES,
    ))

    assert quotation["discount_exceeds_limit"] is True
    flagged = asyncio.run(service.list_exceeded_discounts())
    assert [q["id"] for q in flagged] == [quotation["id"]]


def test_update_reprices_when_pricing_changes():
    service, _, _, _ = _service()
    quotation = asyncio.run(service.create_quotation(_create(), SALES))

    updated = asyncio.run(service.update_quotation(quotation["id"], QuotationUpdate(include_gst=False), SALES))

    assert updated["grand_total"] == 1000
    assert updated["totals"]["total_gst"] == 0


def test_sending_moves_new_enquiry_to_quotation_sent():
    service, quotation_repo, enquiry_repo, _ = _service()
    quotation = asyncio.run(service.create_quotation(_create(), SALES))

    sent = asyncio.run(service.change_status(quotation["id"], QuotationStatus.sent, SALES))

    assert sent["status"] == "sent"
    assert sent["sent_at"] is not None
    assert enquiry_repo.enquiries["e1"]["status"] == "quotation_sent"


def test_invalid_status_transition_is_400():
    service, _, _, _ = _service()
    quotation = asyncio.run(service.create_quotation(_create(), SALES))

    with pytest.raises(HTTPException) as exc:
        asyncio.run(service.change_status(quotation["id"], QuotationStatus.accepted, SALES))

    assert exc.value.status_code == 400


def test_calculate_does_not_store_anything():
    service, quotation_repo, _, _ = _service()

    totals = asyncio.run(service.calculate(PricingInput(
        venue_rental_items=[{"venue": "Lawn", "session": "Lunch", "session_rate": 500}],
    )))

    assert totals.grand_total == 500
    assert quotation_repo.quotations == {}


def test_package_templates():
    service, _, _, _ = _service()

    package = asyncio.run(service.create_package(QuotationPackageCreate(name="Wedding Classic")))

    assert asyncio.run(service.get_package(package["id"]))["name"] == "Wedding Classic"
    assert len(asyncio.run(service.list_packages(active_only=True))) == 1
    asyncio.run(service.delete_package(package["id"]))
    with pytest.raises(HTTPException) as exc:
        asyncio.run(service.get_package(package["id"]))
    assert exc.value.status_code == 404
