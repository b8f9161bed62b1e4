from fastapi import HTTPException
import logging
from typing import Dict, Optional
from datetime import datetime, timezone
from venuedesk.core.permissions import can_edit_resource, user_id
from venuedesk.modules.audit.service import AuditService
from venuedesk.modules.enquiries.models import EnquiryStatus
from venuedesk.modules.enquiries.repository import EnquiryRepository
from venuedesk.modules.enquiries.service import status_change
from venuedesk.modules.quotations.models import (
    Quotation, QuotationPackage, QuotationStatus, STATUS_FLOW, STATUS_TIMESTAMPS,
)
from venuedesk.modules.quotations.pricing import QuotationTotals, calculate_totals, exceeds_discount_limit
from venuedesk.modules.quotations.repository import QuotationRepository
from venuedesk.modules.quotations.schemas import (
    PricingInput, QuotationCreate, QuotationUpdate, QuotationPackageCreate, QuotationPackageUpdate,
)
from venuedesk.modules.settings.service import SettingsService

PRICING_FIELDS = ("venue_rental_items", "room_packages", "menu_packages",
                  "include_gst", "discount_type", "discount_value")


def format_quotation_number(when: datetime, seq: int) -> str:
    return f"QTN-{when.year}-{when.month:02d}-{when.day:02d}-{seq:03d}"


class QuotationService:
    def __init__(self,
                 quotation_repo: QuotationRepository,
                 enquiry_repo: EnquiryRepository,
                 settings_service: SettingsService,
                 audit_service: AuditService
                 ):
        self.quotation_repo = quotation_repo
        self.enquiry_repo = enquiry_repo
        self.settings_service = settings_service
        self.audit_service = audit_service

    async def _price(self, pricing: PricingInput):
        totals = calculate_totals(
            pricing.venue_rental_items,
            pricing.room_packages,
            pricing.menu_packages,
            pricing.include_gst,
            pricing.discount_type,
            pricing.discount_value,
        )
        limit = await self.settings_service.max_discount_percentage()
        exceeded = exceeds_discount_limit(pricing.discount_type, pricing.discount_value, totals, limit)
        return totals, exceeded

    async def calculate(self, pricing: PricingInput) -> QuotationTotals:
        totals, _ = await self._price(pricing)
        return totals

    async def _editable_enquiry(self, enquiry_id: str, current_user: Dict):
        enquiry = await self.enquiry_repo.find_enquiry_by_id(enquiry_id)
        if not enquiry:
            raise HTTPException(status_code=404, detail="Enquiry not found")
        if not can_edit_resource(current_user, enquiry):
            raise HTTPException(status_code=403, detail="You do not have permission to quote for this enquiry")
        return enquiry

    async def create_quotation(self, data: QuotationCreate, current_user: Dict):
        enquiry = await self._editable_enquiry(data.enquiry_id, current_user)

        if data.parent_quotation_id:
            parent = await self.quotation_repo.find_quotation_by_id(data.parent_quotation_id)
            if not parent:
                raise HTTPException(status_code=404, detail="Parent quotation not found")
            if parent.get("enquiry_id") != data.enquiry_id:
                raise HTTPException(status_code=400, detail="Parent quotation belongs to a different enquiry")

        totals, exceeded = await self._price(data)
        now = datetime.now(timezone.utc)
        seq = await self.quotation_repo.next_quotation_sequence(now.strftime("%Y-%m-%d"))
        version = await self.quotation_repo.max_version(data.enquiry_id) + 1

        fields = data.model_dump(exclude_none=True)
        fields.setdefault("client_name", enquiry.get("client_name"))
        fields.setdefault("client_email", enquiry.get("email"))
        fields.setdefault("client_phone", enquiry.get("contact_number"))
        fields.setdefault("event_type", enquiry.get("event_type"))
        fields.setdefault("event_date", enquiry.get("event_date"))
        fields.setdefault("expected_guests", enquiry.get("expected_pax"))

        quotation = Quotation(
            **fields,
            quotation_number=format_quotation_number(now, seq),
            enquiry_number=enquiry.get("enquiry_number"),
            version=version,
            discount_exceeds_limit=exceeded,
            totals=totals.model_dump(),
            grand_total=totals.grand_total,
            created_by=user_id(current_user),
        )
        doc = quotation.model_dump()
        await self.quotation_repo.add_quotation(doc)
        doc.pop("_id", None)

        await self.audit_service.log_business_action(
            current_user, "quotation_created", "enquiries", quotation.id,
            {
                "quotation_number": quotation.quotation_number,
                "enquiry_id": quotation.enquiry_id,
                "version": quotation.version,
                "grand_total": quotation.grand_total,
                "discount_amount": totals.discount_amount,
                "discount_exceeds_limit": exceeded,
            },
        )
        if exceeded:
            logging.warning(f"Quotation {quotation.quotation_number} exceeds the discount limit")
        return doc

    async def list_quotations(self, enquiry_id: Optional[str] = None):
        query = {"enquiry_id": enquiry_id} if enquiry_id else {}
        return await self.quotation_repo.find_quotations(query)

    async def list_exceeded_discounts(self):
        return await self.quotation_repo.find_quotations({"discount_exceeds_limit": True})

    async def get_quotation(self, quotation_id: str):
        quotation = await self.quotation_repo.find_quotation_by_id(quotation_id)
        if not quotation:
            raise HTTPException(status_code=404, detail="Quotation not found")
        return quotation

    async def update_quotation(self, quotation_id: str, data: QuotationUpdate, current_user: Dict):
        existing = await self.get_quotation(quotation_id)
        await self._editable_enquiry(existing["enquiry_id"], current_user)

        update_data = data.model_dump(exclude_none=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="Nothing to update")

        if any(f in update_data for f in PRICING_FIELDS):
            merged = {f: existing.get(f) for f in PRICING_FIELDS if existing.get(f) is not None}
            merged.update({f: update_data[f] for f in PRICING_FIELDS if f in update_data})
            pricing = PricingInput(**merged)
            totals, exceeded = await self._price(pricing)
            update_data["totals"] = totals.model_dump()
            update_data["grand_total"] = totals.grand_total
            update_data["discount_exceeds_limit"] = exceeded

        update_data["updated_at"] = datetime.now(timezone.utc)
        return await self.quotation_repo.update_quotation(quotation_id, update_data)

    async def change_status(self, quotation_id: str, status: QuotationStatus, current_user: Dict):
        existing = await self.get_quotation(quotation_id)
        enquiry = await self._editable_enquiry(existing["enquiry_id"], current_user)

        current = QuotationStatus(existing.get("status", QuotationStatus.draft.value))
        if status not in STATUS_FLOW[current]:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid status transition from {current.value} to {status.value}",
            )

        now = datetime.now(timezone.utc)
        quotation = await self.quotation_repo.update_quotation(quotation_id, {
            "status": status.value,
            STATUS_TIMESTAMPS[status]: now,
            "updated_at": now,
        })

        if status == QuotationStatus.sent and enquiry.get("status") == EnquiryStatus.new.value:
            status_set, push = status_change(
                enquiry.get("status"), EnquiryStatus.quotation_sent, user_id(current_user),
                note=f"Quotation {existing.get('quotation_number')} sent",
            )
            await self.enquiry_repo.update_enquiry(enquiry["id"], status_set, push)

        await self.audit_service.log_business_action(
            current_user, "quotation_status_changed", "enquiries", quotation_id,
            {
                "quotation_number": existing.get("quotation_number"),
                "from_status": current.value,
                "to_status": status.value,
            },
        )
        return quotation

    async def delete_quotation(self, quotation_id: str, current_user: Dict):
        existing = await self.get_quotation(quotation_id)
        await self._editable_enquiry(existing["enquiry_id"], current_user)
        await self.quotation_repo.delete_quotation(quotation_id)
        await self.audit_service.log_business_action(
            current_user, "quotation_deleted", "enquiries", quotation_id,
            {"quotation_number": existing.get("quotation_number")},
        )
        return {"message": "Quotation deleted successfully"}

    # Templates

    async def list_packages(self, active_only: bool = False):
        return await self.quotation_repo.find_packages(active_only)

    async def get_package(self, package_id: str):
        package = await self.quotation_repo.find_package_by_id(package_id)
        if not package:
            raise HTTPException(status_code=404, detail="Quotation package not found")
        return package

    async def create_package(self, data: QuotationPackageCreate):
        package = QuotationPackage(**data.model_dump())
        doc = package.model_dump()
        await self.quotation_repo.add_package(doc)
        doc.pop("_id", None)
        return doc

    async def update_package(self, package_id: str, data: QuotationPackageUpdate):
        update_data = data.model_dump(exclude_none=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="Nothing to update")
        update_data["updated_at"] = datetime.now(timezone.utc)
        package = await self.quotation_repo.update_package(package_id, update_data)
        if not package:
            raise HTTPException(status_code=404, detail="Quotation package not found")
        return package

    async def delete_package(self, package_id: str):
        if not await self.quotation_repo.delete_package(package_id):
            raise HTTPException(status_code=404, detail="Quotation package not found")
        return {"message": "Quotation package deleted successfully"}
