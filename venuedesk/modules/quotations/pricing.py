"""
Quotation totals.

GST is added per category first, then one discount is taken off the
GST-inclusive total and spread over the categories in proportion to their
share. Every amount a client sees is rounded up to a whole rupee.
Arithmetic runs on Decimal so that e.g. 18% of 100 stays exactly 18.
"""

from decimal import Decimal, ROUND_CEILING
from typing import Iterable, Optional
from pydantic import BaseModel
from venuedesk.modules.quotations.models import (
    DiscountType, MenuPackageSelection, RoomPackage, VenueRentalItem,
)

VENUE_GST_RATE = Decimal("0.18")
MENU_GST_RATE = Decimal("0.18")
ROOM_GST_RATE_STANDARD = Decimal("0.05")
ROOM_GST_RATE_PREMIUM = Decimal("0.18")
# Room tariffs above this attract the premium rate
ROOM_PREMIUM_TARIFF = Decimal("7500")

DEFAULT_ROOM_OCCUPANCY = 2


class QuotationTotals(BaseModel):
    venue_base_total: float = 0
    room_base_total: float = 0
    menu_base_total: float = 0
    venue_gst: int = 0
    room_gst: int = 0
    menu_gst: int = 0
    total_gst: int = 0
    venue_total_with_gst: int = 0
    room_total_with_gst: int = 0
    menu_total_with_gst: int = 0
    total_with_gst: int = 0
    discount_amount: int = 0
    venue_discount: int = 0
    room_discount: int = 0
    menu_discount: int = 0
    venue_total: int = 0
    room_total: int = 0
    menu_total: int = 0
    grand_total: int = 0
    effective_discount_percentage: float = 0


def _d(value) -> Decimal:
    return Decimal(str(value or 0))


def round_up(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_CEILING))


def room_base(item: RoomPackage) -> Decimal:
    rooms = item.number_of_rooms or 1
    default_occupancy = item.default_occupancy or DEFAULT_ROOM_OCCUPANCY
    included = default_occupancy * rooms
    occupancy = item.total_occupancy or included
    extra_persons = max(0, occupancy - included)
    return _d(item.rate) * rooms + extra_persons * _d(item.extra_person_rate)


def room_gst_rate(rate) -> Decimal:
    return ROOM_GST_RATE_PREMIUM if _d(rate) > ROOM_PREMIUM_TARIFF else ROOM_GST_RATE_STANDARD


def menu_base(package: MenuPackageSelection) -> Decimal:
    extras = sum(
        (_d(i.additional_price) for i in package.selected_items if not i.is_package_item),
        Decimal(0),
    )
    return _d(package.price) + extras


def discount_amount(total_with_gst: int, discount_type: Optional[DiscountType], value: float) -> int:
    value = _d(value)
    if value <= 0 or total_with_gst <= 0:
        return 0
    if discount_type == DiscountType.percentage:
        return round_up(total_with_gst * value / 100)
    if discount_type == DiscountType.fixed:
        return round_up(min(value, Decimal(total_with_gst)))
    return 0


def calculate_totals(venue_items: Iterable[VenueRentalItem],
                     room_packages: Iterable[RoomPackage],
                     menu_packages: Iterable[MenuPackageSelection],
                     include_gst: bool = False,
                     discount_type: Optional[DiscountType] = None,
                     discount_value: float = 0) -> QuotationTotals:
    room_packages = list(room_packages)

    venue_base = sum((_d(i.session_rate) for i in venue_items), Decimal(0))
    rooms_base = sum((room_base(i) for i in room_packages), Decimal(0))
    menus_base = sum((menu_base(p) for p in menu_packages), Decimal(0))

    if include_gst:
        venue_gst = round_up(venue_base * VENUE_GST_RATE)
        room_gst = round_up(sum(
            (room_base(i) * room_gst_rate(i.rate) for i in room_packages), Decimal(0)
        ))
        menu_gst = round_up(menus_base * MENU_GST_RATE)
    else:
        venue_gst = room_gst = menu_gst = 0

    venue_with_gst = round_up(venue_base + venue_gst)
    room_with_gst = round_up(rooms_base + room_gst)
    menu_with_gst = round_up(menus_base + menu_gst)
    total_with_gst = venue_with_gst + room_with_gst + menu_with_gst

    discount = discount_amount(total_with_gst, discount_type, discount_value)

    def share(category_total: int) -> int:
        if total_with_gst <= 0:
            return 0
        return round_up(Decimal(category_total) * discount / total_with_gst)

    venue_discount = share(venue_with_gst)
    room_discount = share(room_with_gst)
    menu_discount = share(menu_with_gst)

    effective = (
        round(float(Decimal(discount) * 100 / total_with_gst), 2) if total_with_gst > 0 else 0
    )

    return QuotationTotals(
        venue_base_total=float(venue_base),
        room_base_total=float(rooms_base),
        menu_base_total=float(menus_base),
        venue_gst=venue_gst,
        room_gst=room_gst,
        menu_gst=menu_gst,
        total_gst=venue_gst + room_gst + menu_gst,
        venue_total_with_gst=venue_with_gst,
        room_total_with_gst=room_with_gst,
        menu_total_with_gst=menu_with_gst,
        total_with_gst=total_with_gst,
        discount_amount=discount,
        venue_discount=venue_discount,
        room_discount=room_discount,
        menu_discount=menu_discount,
        venue_total=venue_with_gst - venue_discount,
        room_total=room_with_gst - room_discount,
        menu_total=menu_with_gst - menu_discount,
        grand_total=total_with_gst - discount,
        effective_discount_percentage=effective,
    )


def exceeds_discount_limit(discount_type: Optional[DiscountType], discount_value: float,
                           totals: QuotationTotals, max_percentage: float) -> bool:
    if discount_type == DiscountType.percentage:
        return discount_value > max_percentage
    if discount_type == DiscountType.fixed:
        return totals.effective_discount_percentage > max_percentage
    return False
