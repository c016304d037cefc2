# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Unit tests for listing derivation."""

import logging

import pytest

from unitmix.building import (
    BuildingState,
    FloorConfig,
    FloorGrid,
    TemplateStore,
    UnitTypeCount,
    UnitTypeTemplate,
)
from unitmix.catalog import OFFICE_CATALOG
from unitmix.core.primitives import BuildingTypeEnum, DerivationError
from unitmix.derivation import UnitsOnFloor, derive_listings


def make_state(*floors, templates=(), **info) -> BuildingState:
    """State from per-floor lists of (type, count, price) tuples."""
    grid = FloorGrid(
        floors=tuple(
            FloorConfig(
                floor_number=number,
                unit_types=tuple(UnitTypeCount(type=t, count=c, price=p) for t, c, p in entries),
            )
            for number, entries in enumerate(floors, start=1)
        )
    )
    info.setdefault("name", "Riverside")
    info.setdefault("location", "Kampala")
    return BuildingState(floors=grid, templates=TemplateStore(templates=tuple(templates)), **info)


def by_type(listings):
    return {listing.unit_type: listing for listing in listings}


class TestAggregation:
    def test_uniform_floors_collapse_to_one_listing(self):
        state = make_state(*[[("1BR", 2, 1_000_000.0)]] * 3)
        listings = derive_listings(state)
        assert len(listings) == 1
        assert listings[0].total_unit_count == 6
        assert listings[0].price == 1_000_000
        assert listings[0].floors == [1, 2, 3]

    def test_mixed_floor(self):
        state = make_state(
            [("1BR", 2, 0.0)],
            [("Studio", 1, 500_000.0), ("2BR", 3, 1_500_000.0)],
            [("1BR", 2, 0.0)],
        )
        listings = by_type(derive_listings(state))
        assert list(listings) == ["1BR", "Studio", "2BR"]
        assert listings["2BR"].units_per_floor == (UnitsOnFloor(floor=2, count=3),)
        assert listings["2BR"].price == 1_500_000
        assert listings["Studio"].total_unit_count == 1
        assert listings["Studio"].price == 500_000
        assert listings["1BR"].total_unit_count == 4

    def test_one_listing_per_type_and_counts_add_up(self):
        state = make_state(
            [("1BR", 3, 0.0), ("2BR", 1, 0.0)],
            [("Studio", 5, 0.0)],
            [("2BR", 2, 0.0), ("3BR", 1, 0.0), ("1BR", 1, 0.0)],
        )
        listings = derive_listings(state)
        assert sorted(l.unit_type for l in listings) == sorted(state.floors.unit_types())
        assert sum(l.total_unit_count for l in listings) == state.floors.total_units
        for listing in listings:
            assert listing.total_unit_count == sum(e.count for e in listing.units_per_floor)

    def test_order_of_first_appearance(self):
        state = make_state([("3BR", 1, 0.0)], [("Studio", 1, 0.0), ("3BR", 1, 0.0)])
        assert [l.unit_type for l in derive_listings(state)] == ["3BR", "Studio"]


class TestPricing:
    def test_zero_template_price_falls_back_to_highest_floor_price(self):
        template = UnitTypeTemplate(type="1BR", bedrooms=1, bathrooms=1, area=55.0, price=0.0)
        state = make_state(
            [("1BR", 1, 200_000.0)],
            [("1BR", 1, 300_000.0)],
            templates=[template],
        )
        assert derive_listings(state)[0].price == 300_000

    def test_positive_template_price_wins(self):
        template = UnitTypeTemplate(type="1BR", bedrooms=1, bathrooms=1, area=55.0, price=450.0)
        state = make_state([("1BR", 1, 900.0)], templates=[template])
        assert derive_listings(state)[0].price == 450

    def test_all_zero_prices(self):
        assert derive_listings(make_state([("1BR", 1, 0.0)]))[0].price == 0


class TestTemplates:
    def test_without_template_uses_catalog_and_auto_text(self):
        listing = derive_listings(make_state([("2BR", 3, 0.0)], [("2BR", 3, 0.0)]))[0]
        assert listing.has_template is False
        assert listing.title == "Riverside - 2 Bedroom"
        assert listing.description == "2 Bedroom unit at Kampala. 6 units available."
        assert (listing.bedroom_count, listing.bathroom_count, listing.area) == (2, 2, 80.0)
        assert listing.media == ()

    def test_auto_description_without_location(self):
        listing = derive_listings(make_state([("Studio", 3, 0.0)], location=""))[0]
        assert listing.description == "Studio unit. 3 units available."

    def test_template_fields_flow_through(self):
        template = UnitTypeTemplate(
            type="2BR",
            title="Garden Two-Bed",
            description="",
            bedrooms=2,
            bathrooms=1,
            area=72.5,
            features=["balcony"],
            min_lease_term=12,
            pet_policy="cats only",
        )
        listing = derive_listings(make_state([("2BR", 1, 0.0)], templates=[template]))[0]
        assert listing.has_template is True
        assert listing.title == "Garden Two-Bed"
        assert listing.description == "2 Bedroom unit at Kampala. 1 units available."
        assert (listing.bathroom_count, listing.area) == (1, 72.5)
        assert listing.features == ("balcony",)
        assert listing.min_lease_term == 12
        assert listing.pet_policy == "cats only"

    def test_stale_template_is_ignored(self, caplog):
        stale = UnitTypeTemplate(type="Penthouse", bedrooms=4, bathrooms=3, area=200.0)
        state = make_state([("1BR", 1, 0.0)], templates=[stale])
        with caplog.at_level(logging.DEBUG, logger="unitmix.derivation.listing"):
            listings = derive_listings(state)
        assert [l.unit_type for l in listings] == ["1BR"]
        assert "Penthouse" in caplog.text

    def test_default_lease_term(self):
        listing = derive_listings(make_state([("1BR", 1, 0.0)]), default_min_lease_term=6)[0]
        assert listing.min_lease_term == 6

    def test_office_catalog(self):
        state = make_state([("TeamSuite", 2, 0.0)], building_type=BuildingTypeEnum.OFFICE)
        listing = derive_listings(state)[0]
        assert listing.desk_capacity == 12
        assert listing.label == OFFICE_CATALOG.label_for("TeamSuite")


class TestErrors:
    def test_no_floors(self):
        with pytest.raises(DerivationError):
            derive_listings(BuildingState())

    def test_floors_without_entries(self):
        grid = FloorGrid(floors=(FloorConfig(floor_number=1, unit_types=()),))
        with pytest.raises(DerivationError):
            derive_listings(BuildingState(floors=grid))

    def test_state_is_not_modified(self):
        state = make_state([("1BR", 2, 100.0)])
        before = state.model_dump()
        derive_listings(state)
        assert state.model_dump() == before
