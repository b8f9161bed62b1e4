import pytest
from pydantic import ValidationError

from venuedesk.modules.quotations.models import (
    DiscountType, MenuPackageSelection, MenuSelectedItem, RoomPackage, VenueRentalItem,
)
from venuedesk.modules.quotations.pricing import (
    calculate_totals, exceeds_discount_limit, room_base, room_gst_rate,
)
from venuedesk.modules.quotations.schemas import PricingInput


def _venue(rate):
    return VenueRentalItem(venue="Grand Hall", session="Dinner", session_rate=rate)


def _menu(price, extras=()):
    items = [MenuSelectedItem(name="Paneer Tikka", is_package_item=True)]
    items += [MenuSelectedItem(name=name, additional_price=p, is_package_item=False) for name, p in extras]
    return MenuPackageSelection(name="Gold", price=price, selected_items=items)


def test_eighteen_percent_of_one_hundred_is_exactly_eighteen():
    totals = calculate_totals([_venue(100)], [], [], include_gst=True)

    assert totals.venue_gst == 18
    assert totals.venue_total_with_gst == 118
    assert totals.grand_total == 118


def test_no_gst_unless_requested():
    totals = calculate_totals([_venue(1000)], [], [_menu(500)])

    assert totals.total_gst == 0
    assert totals.grand_total == 1500


def test_fractional_amounts_round_up_to_whole_rupees():
    totals = calculate_totals([_venue(99.5)], [], [])

    assert totals.venue_base_total == 99.5
    assert totals.grand_total == 100


def test_room_gst_rate_depends_on_tariff():
    assert float(room_gst_rate(7500)) == 0.05
    assert float(room_gst_rate(7501)) == 0.18

    totals = calculate_totals(
        [],
        [RoomPackage(category="Deluxe", rate=5000, number_of_rooms=2),
         RoomPackage(category="Suite", rate=8000, number_of_rooms=1)],
        [],
        include_gst=True,
    )

    assert totals.room_base_total == 18000
    assert totals.room_gst == 500 + 1440
    assert totals.room_total_with_gst == 19940


def test_extra_persons_are_charged_above_default_occupancy():
    room = RoomPackage(category="Deluxe", rate=3000, number_of_rooms=1,
                       total_occupancy=3, extra_person_rate=1000)

    assert room_base(room) == 4000


def test_menu_charges_only_items_outside_the_package():
    totals = calculate_totals([], [], [_menu(1200, extras=[("Live Counter", 150)])], include_gst=True)

    assert totals.menu_base_total == 1350
    assert totals.menu_gst == 243
    assert totals.grand_total == 1593


def test_percentage_discount_is_split_in_proportion():
    totals = calculate_totals(
        [_venue(1000)], [], [_menu(1000)],
        include_gst=True, discount_type=DiscountType.percentage, discount_value=10,
    )

    assert totals.total_with_gst == 2360
    assert totals.discount_amount == 236
    assert totals.venue_discount == 118
    assert totals.menu_discount == 118
    assert totals.venue_total == 1062
    assert totals.grand_total == 2124
    assert totals.effective_discount_percentage == 10.0


def test_fixed_discount_is_capped_at_total():
    totals = calculate_totals([_venue(1000)], [], [], discount_type=DiscountType.fixed, discount_value=5000)

    assert totals.discount_amount == 1000
    assert totals.grand_total == 0


def test_discount_without_type_is_ignored():
    totals = calculate_totals([_venue(1000)], [], [], discount_value=50)

    assert totals.discount_amount == 0


def test_empty_quotation_totals_zero():
    totals = calculate_totals([], [], [], include_gst=True, discount_type=DiscountType.percentage, discount_value=5)

    assert totals.grand_total == 0
    assert totals.effective_discount_percentage == 0


def test_discount_limit():
    totals = calculate_totals([_venue(1000)], [], [_menu(1000)], include_gst=True,
                              discount_type=DiscountType.fixed, discount_value=500)

    assert totals.effective_discount_percentage == 21.19
    assert exceeds_discount_limit(DiscountType.fixed, 500, totals, 10)
    assert not exceeds_discount_limit(DiscountType.fixed, 500, totals, 25)
    assert exceeds_discount_limit(DiscountType.percentage, 12, totals, 10)
    assert not exceeds_discount_limit(DiscountType.percentage, 10, totals, 10)
    assert not exceeds_discount_limit(None, 0, totals, 10)


def test_percentage_above_one_hundred_is_rejected():
    with pytest.raises(ValidationError):
        PricingInput(discount_type=DiscountType.percentage, discount_value=150)

    PricingInput(discount_type=DiscountType.fixed, discount_value=150)
