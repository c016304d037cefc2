# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Unit tests for the building edit session."""

import pytest

from unitmix.building import BuildingEditor, SetFloorPrice, SetTotalFloors
from unitmix.core.primitives import (
    CollaboratorError,
    CommitStage,
    NotFoundError,
    SequentialIdGenerator,
    ValidationError,
)
from unitmix.numbering import decode, is_placeholder


class TestSession:
    def test_new_building(self):
        editor = BuildingEditor.new("Riverside", "Kampala", total_floors=2)
        assert editor.state.name == "Riverside"
        assert editor.state.floors.total_floors == 2
        assert editor.history == ()

    def test_history_records_applied_commands(self):
        editor = BuildingEditor.new(total_floors=1, ids=SequentialIdGenerator())
        editor.set_total_floors(2)
        editor.set_price(1, 0, 100)
        assert editor.history == (SetTotalFloors(2), SetFloorPrice(1, 0, 100))

    def test_rejected_command_leaves_state_and_history(self, editor):
        before = editor.state
        history = editor.history
        with pytest.raises(ValidationError):
            editor.set_price(1, 0, -1)
        with pytest.raises(NotFoundError):
            editor.set_count(7, "1BR", 1)
        assert editor.state is before
        assert editor.history == history

    def test_set_building_info(self, editor):
        editor.set_building_info(name="Lakeside")
        assert editor.state.name == "Lakeside"
        assert editor.state.location == "Kampala"
        assert editor.get_or_default("2BR").title == "Lakeside - 2 Bedroom"


class TestScenarios:
    def test_price_on_floor_one_reaches_all_floors(self, scenario_a_editor):
        editor = scenario_a_editor
        editor.set_price(1, 0, 1_000_000)

        assert editor.state.floors.prices_for("1BR") == [1_000_000] * 3
        assert editor.get_or_default("1BR").price == 1_000_000
        listings = editor.derive_listings()
        assert len(listings) == 1
        assert listings[0].total_unit_count == 6
        assert listings[0].price == 1_000_000

    def test_reducing_floors_discards_entries_and_units(self, editor):
        editor.set_total_floors(5)
        editor.add_or_increment(4, "2BR")
        editor.generate_units_from_floors()
        floors_before = editor.state.floors.floors[:3]
        units_before = [u for u in editor.state.units if u.floor_number <= 3]

        editor.set_total_floors(3)

        assert editor.state.floors.total_floors == 3
        assert editor.state.floors.floors == floors_before
        assert [u for u in editor.state.units] == units_before
        assert "2BR" not in editor.state.floors.unit_types()

    def test_removing_third_unit_renumbers_floor(self, editor):
        editor.set_count(1, "1BR", 4)
        editor.generate_units_from_floors()
        floor_one = editor.state.units.on_floor(1)
        assert [decode(u.unit_code).sequence for u in floor_one] == [1, 2, 3, 4]

        editor.remove_unit(floor_one[2].id)

        remaining = editor.state.units.on_floor(1)
        assert [decode(u.unit_code).sequence for u in remaining] == [1, 2, 3]
        assert remaining[2].id == floor_one[3].id


class TestImages:
    def test_add_image_creates_template(self, editor):
        image_id = editor.add_image("1BR", "https://cdn.test/a.jpg", category="bedroom")
        template = editor.state.templates.get("1BR")
        assert template.primary_image.id == image_id
        assert template.media[0].category == "bedroom"

    def test_remove_set_primary_and_reorder(self, editor):
        first = editor.add_image("1BR", "u1")
        second = editor.add_image("1BR", "u2")
        third = editor.add_image("1BR", "u3")

        editor.set_primary_image("1BR", third)
        editor.reorder_images("1BR", [third, second, first])
        editor.remove_image("1BR", third)

        template = editor.state.templates.get("1BR")
        assert [image.id for image in template.media] == [second, first]
        assert template.primary_image.id == second

    def test_image_ops_on_missing_template(self, editor):
        with pytest.raises(NotFoundError):
            editor.remove_image("Penthouse", "img")

    def test_blank_url_rejected(self, editor):
        with pytest.raises(ValidationError):
            editor.add_image("1BR", "  ")

    def test_unknown_category_rejected(self, editor):
        before = editor.state
        with pytest.raises(ValidationError) as exc_info:
            editor.add_image("1BR", "https://cdn.test/a.jpg", category="garage")
        assert exc_info.value.field == "category"
        assert editor.state is before

    @pytest.mark.asyncio
    async def test_upload_with_unknown_category_is_not_sent(self, editor, uploads):
        with pytest.raises(ValidationError):
            await editor.upload_image(uploads, "1BR", b"x", "a.png", category="garage")
        assert uploads.stored == {}

    @pytest.mark.asyncio
    async def test_upload_image_attaches_url(self, editor, uploads):
        image_id = await editor.upload_image(uploads, "1BR", b"\x89PNG", "living room.png")
        template = editor.state.templates.get("1BR")
        assert template.primary_image.id == image_id
        assert template.media[0].url == "https://cdn.example.test/buildings/draft/1BR/living-room.png"
        assert uploads.stored["buildings/draft/1BR/living-room.png"] == b"\x89PNG"

    @pytest.mark.asyncio
    async def test_failed_upload_leaves_state(self, editor, uploads):
        uploads.fail = True
        before = editor.state
        with pytest.raises(CollaboratorError) as exc_info:
            await editor.upload_image(uploads, "1BR", b"data", "a.png")
        assert exc_info.value.stage == CommitStage.UPLOAD
        assert editor.state is before


class TestUnits:
    def test_generate_only_once(self, editor):
        editor.generate_units_from_floors()
        generated = editor.state.units
        editor.set_count(1, "1BR", 5)
        editor.generate_units_from_floors()
        assert editor.state.units == generated

    def test_units_use_placeholders_before_commit(self, editor):
        editor.generate_units_from_floors()
        assert all(is_placeholder(u.unit_code) for u in editor.state.units)

    def test_reconcile_follows_floor_counts(self, editor):
        editor.generate_units_from_floors()
        editor.set_count(1, "1BR", 3)
        editor.reconcile_units()
        assert len(editor.state.units.on_floor(1)) == 3
        assert editor.unit_stats().total == editor.state.floors.total_units

    def test_add_and_update_unit(self, editor):
        unit = editor.add_unit(2, "1BR")
        editor.bulk_add_units(2, "1BR", 2)
        editor.update_unit(unit.id, is_available=False)
        assert editor.unit_stats().available == 2
        assert [decode(u.unit_code).sequence for u in editor.state.units.on_floor(2)] == [1, 2, 3]

    def test_add_unit_on_unknown_floor(self, editor):
        with pytest.raises(NotFoundError):
            editor.add_unit(9, "1BR")


class TestSummary:
    def test_summary(self, editor):
        editor.add_or_increment(2, "2BR")
        editor.set_price(2, 1, 900)
        summary = editor.summary()
        assert summary.total_floors == 3
        assert summary.total_units == 4
        assert summary.unit_type_count == 2
        assert summary.units_per_floor == {1: 1, 2: 2, 3: 1}
        two_bed = summary.breakdown[1]
        assert (two_bed.unit_type, two_bed.floors, two_bed.price) == ("2BR", [2], 900)
