# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit-number generation.

Real unit codes are 11 digits, `BBBBFFSSSCC`:

- BBBB: building code (1000-9999), derived from the persisted building id
- FF: floor number (01-99)
- SSS: sequence of the unit on its floor (001-999)
- CC: check digits (Luhn-variant check digit + digit sum mod 10)

Example: `12340510208`
- Building: 1234
- Floor: 5
- Unit: 102 (102nd unit on floor 5)
- Check: 08

Codes are fixed width and purely numeric, so sorting them as strings sorts
by building, then floor, then sequence. Before a building has been
persisted its units carry placeholder codes (`TEMP-05-102`) which contain
letters and therefore never collide with a real code.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence, TypeVar

from ..core.primitives import Model, NumberingSettings, ValidationError, validate_range

logger = logging.getLogger(__name__)

BUILDING_CODE_MIN = 1000
BUILDING_CODE_MAX = 9999
CODE_LENGTH = 11
_REAL_CODE = re.compile(r"^\d{11}$")

T = TypeVar("T")


class UnitNumber(Model):
    """Decoded form of a unit code."""

    building_code: Optional[int] = None
    floor: int
    sequence: int

    @property
    def is_placeholder(self) -> bool:
        return self.building_code is None


def building_code_for(building_id: str) -> int:
    """
    Hash a persisted building identifier (e.g. a UUID) into 1000-9999.

    The hash is a 32-bit string hash over the identifier with hyphens
    removed, so the same id always yields the same code.
    """
    cleaned = str(building_id).replace("-", "")
    value = 0
    for char in cleaned:
        value = (value * 31 + ord(char)) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return abs(value) % 9000 + BUILDING_CODE_MIN


def check_digits(base: str) -> str:
    """
    Two check digits for an all-digit base string.

    First digit: Luhn check digit (doubling every second digit from the
    right). Second digit: sum of all digits mod 10.
    """
    total = 0
    double = False
    for char in reversed(base):
        digit = int(char)
        if double:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
        double = not double
    luhn = (10 - total % 10) % 10
    digit_sum = sum(int(char) for char in base) % 10
    return f"{luhn}{digit_sum}"


def _validate_parts(
    building_code: int, floor: int, sequence: int, settings: NumberingSettings
) -> None:
    validate_range(building_code, "building_code", BUILDING_CODE_MIN, BUILDING_CODE_MAX)
    validate_range(floor, "floor", 1, settings.max_floors)
    validate_range(sequence, "sequence", 1, settings.max_units_per_floor)


def encode(
    building_code: int,
    floor: int,
    sequence: int,
    settings: Optional[NumberingSettings] = None,
) -> str:
    """
    Encode (building, floor, sequence) into an 11-digit unit code.

    Raises:
        ValidationError: If any part is outside its fixed-width range
    """
    settings = settings or NumberingSettings()
    _validate_parts(building_code, floor, sequence, settings)
    base = f"{building_code:04d}{floor:02d}{sequence:03d}"
    return f"{base}{check_digits(base)}"


def placeholder(
    floor: int, sequence: int, settings: Optional[NumberingSettings] = None
) -> str:
    """Temporary code for a unit whose building has no identifier yet."""
    settings = settings or NumberingSettings()
    validate_range(floor, "floor", 1, settings.max_floors)
    validate_range(sequence, "sequence", 1, settings.max_units_per_floor)
    return f"{settings.placeholder_prefix}-{floor:02d}-{sequence:03d}"


def is_placeholder(code: str, settings: Optional[NumberingSettings] = None) -> bool:
    settings = settings or NumberingSettings()
    return code.startswith(f"{settings.placeholder_prefix}-")


def validate(code: str) -> bool:
    """Return True if `code` is a well-formed real code with matching check digits."""
    if not isinstance(code, str) or not _REAL_CODE.match(code):
        return False
    return check_digits(code[:9]) == code[9:]


def decode(code: str, settings: Optional[NumberingSettings] = None) -> UnitNumber:
    """
    Decode a real or placeholder unit code.

    Raises:
        ValidationError: If the code is malformed or its check digits do not match
    """
    settings = settings or NumberingSettings()
    if not isinstance(code, str):
        raise ValidationError("must be a string", field="unit_code", value=code)

    if is_placeholder(code, settings):
        match = re.match(
            rf"^{re.escape(settings.placeholder_prefix)}-(\d{{2}})-(\d{{3}})$", code
        )
        if match is None:
            raise ValidationError("malformed placeholder code", field="unit_code", value=code)
        return UnitNumber(floor=int(match.group(1)), sequence=int(match.group(2)))

    if not validate(code):
        raise ValidationError("malformed or failed check digits", field="unit_code", value=code)
    return UnitNumber(
        building_code=int(code[0:4]),
        floor=int(code[4:6]),
        sequence=int(code[6:9]),
    )


def format_for_display(code: str) -> str:
    """Format a real code as `BBBB-FF-SSS-CC`; other strings are returned unchanged."""
    if not validate(code):
        return code
    return f"{code[0:4]}-{code[4:6]}-{code[6:9]}-{code[9:11]}"


def sequential(
    building_code: int,
    floor: int,
    count: int,
    start: int = 1,
    settings: Optional[NumberingSettings] = None,
) -> List[str]:
    """Codes for `count` consecutive units on one floor starting at `start`."""
    return [
        encode(building_code, floor, start + offset, settings)
        for offset in range(count)
    ]


class UnitNumberGenerator:
    """
    Issues unit codes for one building.

    Without a building code every code is a placeholder; once the building
    has been persisted, `with_building` returns a generator issuing real
    codes.

    Example:
        ```python
        generator = UnitNumberGenerator()
        generator.code_for(3, 1)  # "TEMP-03-001"
        generator.with_building(1234).code_for(3, 1)  # "12340300174"
        ```
    """

    def __init__(
        self,
        building_code: Optional[int] = None,
        settings: Optional[NumberingSettings] = None,
    ):
        self.settings = settings or NumberingSettings()
        if building_code is not None:
            validate_range(
                building_code, "building_code", BUILDING_CODE_MIN, BUILDING_CODE_MAX
            )
        self.building_code = building_code

    def with_building(self, building_code: int) -> "UnitNumberGenerator":
        return UnitNumberGenerator(building_code, self.settings)

    def code_for(self, floor: int, sequence: int) -> str:
        if self.building_code is None:
            return placeholder(floor, sequence, self.settings)
        return encode(self.building_code, floor, sequence, self.settings)

    def decode(self, code: str) -> UnitNumber:
        return decode(code, self.settings)

    def renumber(self, units: Sequence[T]) -> List[T]:
        """
        Reassign codes so each floor's sequences run 1..n without gaps.

        Units keep their relative order in `units`; only `unit_code`
        changes. Running this twice yields the same codes as running it
        once. Each unit must expose `floor_number`, `unit_code` and
        `evolve()`.
        """
        counters = {}
        renumbered = []
        for unit in units:
            floor = unit.floor_number
            counters[floor] = counters.get(floor, 0) + 1
            code = self.code_for(floor, counters[floor])
            if unit.unit_code != code:
                unit = unit.evolve(unit_code=code)
            renumbered.append(unit)
        logger.debug(
            f"Renumbered {len(renumbered)} units across {len(counters)} floors "
            f"(building code: {self.building_code})"
        )
        return renumbered
