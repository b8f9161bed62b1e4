from fastapi import APIRouter, Depends
from typing import Dict, Optional
from venuedesk.modules.auth.rbac import require_permission
from venuedesk.modules.auth.utility import get_current_user
from venuedesk.modules.quotations.dependencies import get_quotation_service
from venuedesk.modules.quotations.models import QuotationStatus
from venuedesk.modules.quotations.pricing import QuotationTotals
from venuedesk.modules.quotations.schemas import (
    PricingInput, QuotationCreate, QuotationUpdate, QuotationStatusUpdate,
    QuotationPackageCreate, QuotationPackageUpdate,
)
from venuedesk.modules.quotations.service import QuotationService

quotation_router = APIRouter(prefix="/quotations", tags=["Quotations"])

# Template routes are registered before /{quotation_id} so "packages" is not read as an id

@quotation_router.get("/packages")
async def list_packages(
    active_only: bool = False,
    current_user: Dict = Depends(get_current_user),
    quotation_service: QuotationService = Depends(get_quotation_service),
    ):
    return await quotation_service.list_packages(active_only)

@quotation_router.get("/packages/{package_id}")
async def get_package(
    package_id: str,
    current_user: Dict = Depends(get_current_user),
    quotation_service: QuotationService = Depends(get_quotation_service),
    ):
    return await quotation_service.get_package(package_id)

@quotation_router.post("/packages", status_code=201)
async def create_package(
    data: QuotationPackageCreate,
    current_user: Dict = Depends(require_permission("settings", "manage")),
    quotation_service: QuotationService = Depends(get_quotation_service),
    ):
    return await quotation_service.create_package(data)

@quotation_router.patch("/packages/{package_id}")
async def update_package(
    package_id: str,
    data: QuotationPackageUpdate,
    current_user: Dict = Depends(require_permission("settings", "manage")),
    quotation_service: QuotationService = Depends(get_quotation_service),
    ):
    return await quotation_service.update_package(package_id, data)

@quotation_router.delete("/packages/{package_id}")
async def delete_package(
    package_id: str,
    current_user: Dict = Depends(require_permission("settings", "manage")),
    quotation_service: QuotationService = Depends(get_quotation_service),
    ):
    return await quotation_service.delete_package(package_id)

@quotation_router.post("/calculate", response_model=QuotationTotals)
async def calculate_totals(
    data: PricingInput,
    current_user: Dict = Depends(require_permission("enquiries", "read")),
    quotation_service: QuotationService = Depends(get_quotation_service),
    ):
    return await quotation_service.calculate(data)

@quotation_router.get("/exceeded-discounts")
async def list_exceeded_discounts(
    current_user: Dict = Depends(require_permission("enquiries", "read")),
    quotation_service: QuotationService = Depends(get_quotation_service),
    ):
    return await quotation_service.list_exceeded_discounts()

@quotation_router.get("/")
async def list_quotations(
    enquiry_id: Optional[str] = None,
    current_user: Dict = Depends(require_permission("enquiries", "read")),
    quotation_service: QuotationService = Depends(get_quotation_service),
    ):
    return await quotation_service.list_quotations(enquiry_id)

@quotation_router.post("/", status_code=201)
async def create_quotation(
    data: QuotationCreate,
    current_user: Dict = Depends(require_permission("enquiries", "update")),
    quotation_service: QuotationService = Depends(get_quotation_service),
    ):
    return await quotation_service.create_quotation(data, current_user)

@quotation_router.get("/{quotation_id}")
async def get_quotation(
    quotation_id: str,
    current_user: Dict = Depends(require_permission("enquiries", "read")),
    quotation_service: QuotationService = Depends(get_quotation_service),
    ):
    return await quotation_service.get_quotation(quotation_id)

@quotation_router.patch("/{quotation_id}")
async def update_quotation(
    quotation_id: str,
    data: QuotationUpdate,
    current_user: Dict = Depends(require_permission("enquiries", "update")),
    quotation_service: QuotationService = Depends(get_quotation_service),
    ):
    return await quotation_service.update_quotation(quotation_id, data, current_user)

@quotation_router.patch("/{quotation_id}/status")
async def change_status(
    quotation_id: str,
    data: QuotationStatusUpdate,
    current_user: Dict = Depends(require_permission("enquiries", "update")),
    quotation_service: QuotationService = Depends(get_quotation_service),
    ):
    return await quotation_service.change_status(quotation_id, data.status, current_user)

@quotation_router.post("/{quotation_id}/send")
async def send_quotation(
    quotation_id: str,
    current_user: Dict = Depends(require_permission("enquiries", "update")),
    quotation_service: QuotationService = Depends(get_quotation_service),
    ):
    quotation = await quotation_service.change_status(quotation_id, QuotationStatus.sent, current_user)
    return {"message": "Quotation marked as sent", "quotation": quotation}

@quotation_router.delete("/{quotation_id}")
async def delete_quotation(
    quotation_id: str,
    current_user: Dict = Depends(require_permission("enquiries", "update")),
    quotation_service: QuotationService = Depends(get_quotation_service),
    ):
    return await quotation_service.delete_quotation(quotation_id, current_user)
