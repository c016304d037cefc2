# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Unit tests for unit-code generation."""

import pytest

from unitmix.core.primitives import NumberingSettings, ValidationError
from unitmix.numbering import (
    UnitNumber,
    UnitNumberGenerator,
    building_code_for,
    check_digits,
    decode,
    encode,
    format_for_display,
    is_placeholder,
    placeholder,
    sequential,
    validate,
)


class _Unit:
    """Minimal object with the attributes `renumber` relies on."""

    def __init__(self, floor_number, unit_code):
        self.floor_number = floor_number
        self.unit_code = unit_code

    def evolve(self, **changes):
        return _Unit(changes.get("floor_number", self.floor_number), changes.get("unit_code", self.unit_code))


class TestEncode:
    def test_known_code(self):
        assert encode(1234, 5, 102) == "12340510208"
        assert encode(1234, 3, 1) == "12340300174"

    def test_check_digits(self):
        assert check_digits("123405102") == "08"

    def test_fixed_width(self):
        assert len(encode(1000, 1, 1)) == 11
        assert len(encode(9999, 99, 999)) == 11

    @pytest.mark.parametrize(
        "building_code,floor,sequence",
        [(999, 1, 1), (10000, 1, 1), (1234, 0, 1), (1234, 100, 1), (1234, 1, 0), (1234, 1, 1000)],
    )
    def test_out_of_range_rejected(self, building_code, floor, sequence):
        with pytest.raises(ValidationError):
            encode(building_code, floor, sequence)

    def test_sorts_by_floor_then_sequence(self):
        codes = [encode(1234, 2, 1), encode(1234, 1, 12), encode(1234, 1, 3), encode(1234, 10, 1)]
        decoded = [decode(code) for code in sorted(codes)]
        assert [(d.floor, d.sequence) for d in decoded] == [(1, 3), (1, 12), (2, 1), (10, 1)]


class TestDecode:
    @pytest.mark.parametrize(
        "building_code,floor,sequence",
        [(1000, 1, 1), (1234, 5, 102), (4821, 12, 7), (9999, 99, 999)],
    )
    def test_round_trip(self, building_code, floor, sequence):
        assert decode(encode(building_code, floor, sequence)) == UnitNumber(
            building_code=building_code, floor=floor, sequence=sequence
        )

    def test_placeholder_decodes_without_building(self):
        number = decode("TEMP-05-102")
        assert number.is_placeholder
        assert (number.floor, number.sequence) == (5, 102)

    @pytest.mark.parametrize("code", ["12340510209", "1234051020", "ABCDEFGHIJK", "TEMP-5-1", ""])
    def test_malformed_rejected(self, code):
        with pytest.raises(ValidationError):
            decode(code)

    def test_validate(self):
        assert validate("12340510208")
        assert not validate("12340510218")
        assert not validate("TEMP-05-102")


class TestPlaceholders:
    def test_placeholder_format(self):
        assert placeholder(3, 7) == "TEMP-03-007"

    def test_placeholder_never_looks_real(self):
        code = placeholder(5, 102)
        assert is_placeholder(code)
        assert not validate(code)
        assert not is_placeholder(encode(1234, 5, 102))

    def test_custom_prefix(self):
        settings = NumberingSettings(placeholder_prefix="DRAFT")
        code = placeholder(1, 1, settings)
        assert code == "DRAFT-01-001"
        assert is_placeholder(code, settings)
        assert decode(code, settings).floor == 1


class TestBuildingCode:
    def test_in_range_and_deterministic(self):
        building_id = "7f3e2a10-9c4b-4d2e-8a61-0b5f2c9d1e77"
        code = building_code_for(building_id)
        assert 1000 <= code <= 9999
        assert building_code_for(building_id) == code

    def test_hyphens_ignored(self):
        assert building_code_for("ab-cd-ef") == building_code_for("abcdef")


class TestHelpers:
    def test_format_for_display(self):
        assert format_for_display("12340510208") == "1234-05-102-08"
        assert format_for_display("TEMP-05-102") == "TEMP-05-102"

    def test_sequential(self):
        codes = sequential(1234, 2, 3, start=4)
        assert [decode(code).sequence for code in codes] == [4, 5, 6]


class TestGenerator:
    def test_placeholder_until_building_known(self):
        generator = UnitNumberGenerator()
        assert generator.code_for(3, 1) == "TEMP-03-001"
        assert generator.with_building(1234).code_for(3, 1) == "12340300174"

    def test_invalid_building_code_rejected(self):
        with pytest.raises(ValidationError):
            UnitNumberGenerator(building_code=42)

    def test_renumber_closes_gaps_per_floor(self):
        """Removing sequence 3 of 4 leaves 1, 2, 3 (previously 1, 2, 4)."""
        generator = UnitNumberGenerator(1234)
        units = [
            _Unit(1, encode(1234, 1, 1)),
            _Unit(1, encode(1234, 1, 2)),
            _Unit(1, encode(1234, 1, 4)),
            _Unit(2, encode(1234, 2, 1)),
        ]
        renumbered = generator.renumber(units)
        assert [(decode(u.unit_code).floor, decode(u.unit_code).sequence) for u in renumbered] == [
            (1, 1),
            (1, 2),
            (1, 3),
            (2, 1),
        ]

    def test_renumber_is_idempotent(self):
        generator = UnitNumberGenerator(1234)
        units = [_Unit(1, "x"), _Unit(2, "y"), _Unit(1, "z")]
        once = [u.unit_code for u in generator.renumber(units)]
        twice = [u.unit_code for u in generator.renumber(generator.renumber(units))]
        assert once == twice
