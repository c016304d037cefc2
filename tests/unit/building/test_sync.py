# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Unit tests for the synchronization controller."""

import datetime

import pytest

from unitmix.building import (
    AddOrIncrement,
    BuildingState,
    ChangeType,
    SetCount,
    SetFloorPrice,
    SetTemplatePrice,
    SetTotalFloors,
    SynchronizationController,
    UpdateTemplate,
)
from unitmix.catalog import OFFICE_CATALOG
from unitmix.core.primitives import (
    BuildingTypeEnum,
    EngineSettings,
    NotFoundError,
    SequentialIdGenerator,
    SyncStatus,
    ValidationError,
)


@pytest.fixture
def controller():
    return SynchronizationController(ids=SequentialIdGenerator())


@pytest.fixture
def state(controller):
    """Three floors of `{1BR, count 2, price 0}`."""
    state = controller.new_building("Riverside", "Kampala", total_floors=1)
    state = controller.apply(state, ChangeType(1, 0, "1BR"))
    state = controller.apply(state, SetCount(1, "1BR", 2))
    return controller.apply(state, SetTotalFloors(3))


class TestPriceSynchronization:
    def test_floor_price_propagates_to_template_and_all_floors(self, controller, state):
        state = controller.apply(state, SetFloorPrice(1, 0, 1_000_000))
        assert state.templates.get("1BR").price == 1_000_000
        assert state.floors.prices_for("1BR") == [1_000_000, 1_000_000, 1_000_000]

    def test_convergence_from_any_floor(self, controller, state):
        state = controller.apply(state, SetFloorPrice(3, 0, 750))
        template = controller.get_or_default(state, "1BR")
        assert template.price == 750
        assert all(price == 750 for price in state.floors.prices_for("1BR"))

    def test_zero_floor_price_does_not_touch_template(self, controller, state):
        state = controller.apply(state, SetFloorPrice(1, 0, 500))
        state = controller.apply(state, SetFloorPrice(2, 0, 0))
        assert state.templates.get("1BR").price == 500
        assert state.floors.prices_for("1BR") == [500, 0, 500]

    def test_template_price_rewrites_every_floor(self, controller, state):
        state = controller.apply(state, AddOrIncrement(2, "Studio"))
        state = controller.apply(state, SetTemplatePrice("1BR", 1_200))
        assert state.floors.prices_for("1BR") == [1_200, 1_200, 1_200]
        assert state.floors.prices_for("Studio") == [0.0]
        assert state.templates.get("1BR").price == 1_200

    def test_template_price_creates_template(self, controller, state):
        state = controller.apply(state, SetTemplatePrice("Penthouse", 9_000))
        assert state.templates.get("Penthouse").price == 9_000
        assert state.templates.get("Penthouse").bedrooms == 4

    def test_negative_price_rejected_without_change(self, controller, state):
        with pytest.raises(ValidationError) as exc_info:
            controller.apply(state, SetFloorPrice(1, 0, -1))
        assert exc_info.value.field == "price"
        with pytest.raises(ValidationError):
            controller.apply(state, SetTemplatePrice("1BR", -1))

    def test_applying_twice_equals_once(self, controller, state):
        once = controller.apply(state, SetFloorPrice(1, 0, 400))
        twice = controller.apply(once, SetFloorPrice(1, 0, 400))
        assert twice == once
        assert len(twice.templates) == 1

    def test_status_returns_to_clean(self, controller, state):
        controller.apply(state, SetFloorPrice(1, 0, 400))
        assert controller.status_of("1BR") == SyncStatus.CLEAN

    def test_input_state_is_not_modified(self, controller, state):
        before = state.model_dump()
        controller.apply(state, SetFloorPrice(1, 0, 400))
        assert state.model_dump() == before


class TestGetOrDefault:
    def test_defaults_are_fully_populated(self, controller, state):
        template = controller.get_or_default(state, "2BR")
        assert template.type == "2BR"
        assert template.title == "Riverside - 2 Bedroom"
        assert template.description == ""
        assert (template.bedrooms, template.bathrooms, template.area) == (2, 2, 80.0)
        assert template.media == ()
        assert template.features == ()
        assert template.min_lease_term == 1

    def test_first_nonzero_floor_price_wins(self, controller):
        state = controller.new_building(total_floors=3)
        state = controller.apply(state, ChangeType(1, 0, "1BR"))
        state = controller.apply(state, SetTotalFloors(1))
        state = controller.apply(state, SetTotalFloors(3))
        floors = state.floors.set_entry_price(2, 0, 300).set_entry_price(3, 0, 450)
        state = state.with_parts(floors=floors)
        assert controller.get_or_default(state, "1BR").price == 300

    def test_unknown_type_uses_fallback_defaults(self, controller, state):
        template = controller.get_or_default(state, "Loft")
        assert (template.bedrooms, template.bathrooms, template.area) == (1, 1, 60.0)

    def test_settings_lease_term(self, state):
        controller = SynchronizationController(settings=EngineSettings(default_min_lease_term=6))
        assert controller.get_or_default(state, "2BR").min_lease_term == 6

    def test_office_catalog(self):
        controller = SynchronizationController(
            settings=EngineSettings(building_type=BuildingTypeEnum.OFFICE)
        )
        assert controller.catalog is OFFICE_CATALOG
        state = controller.new_building("Hub", total_floors=1)
        assert state.floors.floor(1).types() == ["HotDesk"]
        assert controller.get_or_default(state, "TeamSuite").desk_capacity == 12


class TestUpdateTemplate:
    def test_partial_update(self, controller, state):
        state = controller.apply(
            state,
            UpdateTemplate(
                "1BR",
                {
                    "description": "Bright corner unit",
                    "features": ["balcony", "balcony", "wifi"],
                    "available_from": datetime.date(2025, 1, 1),
                },
            ),
        )
        template = state.templates.get("1BR")
        assert template.description == "Bright corner unit"
        assert template.features == ("balcony", "wifi")
        assert template.available_from == datetime.date(2025, 1, 1)
        assert template.bedrooms == 1

    def test_price_in_update_goes_through_propagation(self, controller, state):
        state = controller.apply(state, UpdateTemplate("1BR", {"price": 800, "title": "Nice"}))
        assert state.templates.get("1BR").title == "Nice"
        assert state.floors.prices_for("1BR") == [800, 800, 800]

    @pytest.mark.parametrize(
        "changes,field",
        [
            ({"bedrooms": -1}, "bedrooms"),
            ({"min_lease_term": 0}, "min_lease_term"),
            ({"unknown_field": 1}, "unknown_field"),
            ({"type": "2BR"}, "type"),
            ({"price": -5}, "price"),
        ],
    )
    def test_invalid_update_rejected(self, controller, state, changes, field):
        with pytest.raises(ValidationError) as exc_info:
            controller.apply(state, UpdateTemplate("1BR", changes))
        assert exc_info.value.field == field


class TestFloorCommands:
    def test_set_count_zero_substitutes_default_entry(self, controller, state):
        state = controller.apply(state, SetCount(2, "1BR", 0))
        assert state.floors.floor(2).types() == [controller.default_unit_type]
        assert controller.default_unit_type == "Studio"

    def test_default_entry_uses_configured_type(self):
        controller = SynchronizationController(settings=EngineSettings(default_unit_type="2BR"))
        state = controller.new_building(total_floors=2)
        assert [floor.types() for floor in state.floors.floors] == [["2BR"], ["2BR"]]

    def test_default_entry_price_follows_template(self, controller, state):
        state = controller.apply(state, SetTemplatePrice("Studio", 250))
        state = controller.apply(state, SetCount(2, "1BR", 0))
        assert state.floors.floor(2).unit_types[0].price == 250

    def test_too_many_floors_rejected(self, controller, state):
        with pytest.raises(ValidationError):
            controller.apply(state, SetTotalFloors(100))

    def test_unknown_floor(self, controller, state):
        with pytest.raises(NotFoundError):
            controller.apply(state, SetFloorPrice(9, 0, 100))

    def test_every_floor_keeps_an_entry(self, controller, state):
        commands = [
            SetCount(1, "1BR", 0),
            SetCount(1, "Studio", 0),
            ChangeType(2, 0, "2BR"),
            SetCount(2, "2BR", 0),
            SetTotalFloors(5),
            SetCount(5, "1BR", 0),
            SetTotalFloors(2),
        ]
        for command in commands:
            state = controller.apply(state, command)
            assert all(len(floor.unit_types) >= 1 for floor in state.floors.floors)

    def test_unsupported_command(self, controller, state):
        with pytest.raises(TypeError):
            controller.apply(state, object())

    def test_new_building_state(self, controller):
        state = controller.new_building("Tower", "Nairobi", total_floors=4)
        assert isinstance(state, BuildingState)
        assert state.floors.total_floors == 4
        assert state.building_id is None
