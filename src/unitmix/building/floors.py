# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Floor configuration store.

The floor grid is the source of truth for *quantities*: for every floor it
lists which unit types exist there, how many of each, and the price shown
for them on that floor. Every operation returns a new `FloorGrid`; none of
them mutates the receiver.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from pydantic import Field, field_validator, model_validator

from ..core.primitives import (
    FloorNumber,
    Model,
    Money,
    NotFoundError,
    PositiveIntGe1,
    UnitTypeCode,
    ValidationError,
    validate_count,
    validate_non_negative,
    validate_unit_type,
)

logger = logging.getLogger(__name__)


class UnitTypeCount(Model):
    """
    Quantity and price of one unit type on one floor.

    Attributes:
        type: Unit-type code (e.g., "1BR")
        count: Number of units of this type on the floor (>= 1)
        price: Price per unit shown on this floor
    """

    type: UnitTypeCode
    count: PositiveIntGe1 = 1
    price: Money = 0.0


class FloorConfig(Model):
    """
    Unit-type mix of a single floor.

    Within one floor a unit type appears at most once; adding an existing
    type increments its count instead.
    """

    floor_number: FloorNumber
    unit_types: Tuple[UnitTypeCount, ...] = Field(default_factory=tuple)

    @field_validator("unit_types")
    @classmethod
    def _validate_unique_types(
        cls, unit_types: Tuple[UnitTypeCount, ...]
    ) -> Tuple[UnitTypeCount, ...]:
        types = [entry.type for entry in unit_types]
        if len(types) != len(set(types)):
            raise ValueError(f"Unit types must be unique within a floor, got {types}")
        return unit_types

    @property
    def total_units(self) -> int:
        return sum(entry.count for entry in self.unit_types)

    def types(self) -> List[str]:
        return [entry.type for entry in self.unit_types]

    def index_of(self, unit_type: str) -> Optional[int]:
        for index, entry in enumerate(self.unit_types):
            if entry.type == unit_type:
                return index
        return None

    def entry(self, index: int) -> UnitTypeCount:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self.unit_types):
            raise NotFoundError(f"Unit-type entry on floor {self.floor_number}", index)
        return self.unit_types[index]

    def with_entries(self, entries: List[UnitTypeCount]) -> "FloorConfig":
        return FloorConfig(floor_number=self.floor_number, unit_types=tuple(entries))


class FloorGrid(Model):
    """
    Per-floor unit-type configuration for a whole building.

    Floors are numbered 1..n, contiguous and unique. The grid itself may be
    empty (a building that has not been described yet); every mutation
    below keeps each floor at one or more entries, substituting the
    supplied default entry where an operation would empty a floor.

    Example:
        ```python
        grid = FloorGrid.uniform(3, UnitTypeCount(type="1BR", count=2))
        grid = grid.add_or_increment(2, "Studio")
        grid.counts_by_type()  # {"1BR": 6, "Studio": 1}
        ```
    """

    floors: Tuple[FloorConfig, ...] = Field(default_factory=tuple)

    @model_validator(mode="after")
    def _validate_contiguous(self) -> "FloorGrid":
        numbers = [floor.floor_number for floor in self.floors]
        expected = list(range(1, len(numbers) + 1))
        if numbers != expected:
            raise ValueError(
                f"Floors must be numbered 1..{len(numbers)} in order, got {numbers}"
            )
        return self

    @classmethod
    def uniform(cls, total_floors: int, entry: UnitTypeCount) -> "FloorGrid":
        """Grid of `total_floors` floors each holding a copy of `entry`."""
        validate_count(total_floors, field="total_floors", minimum=1)
        return cls(
            floors=tuple(
                FloorConfig(floor_number=number, unit_types=(entry,))
                for number in range(1, total_floors + 1)
            )
        )

    # --- Queries -----------------------------------------------------------

    @property
    def total_floors(self) -> int:
        return len(self.floors)

    @property
    def total_units(self) -> int:
        return sum(floor.total_units for floor in self.floors)

    def floor(self, floor_number: int) -> FloorConfig:
        if (
            isinstance(floor_number, bool)
            or not isinstance(floor_number, int)
            or not 1 <= floor_number <= len(self.floors)
        ):
            raise NotFoundError("Floor", floor_number)
        return self.floors[floor_number - 1]

    def unit_types(self) -> List[str]:
        """Distinct unit types in first-seen order (floor order, then entry order)."""
        seen: Dict[str, None] = {}
        for floor in self.floors:
            for entry in floor.unit_types:
                seen.setdefault(entry.type, None)
        return list(seen)

    def counts_by_type(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for floor in self.floors:
            for entry in floor.unit_types:
                counts[entry.type] = counts.get(entry.type, 0) + entry.count
        return counts

    def first_nonzero_price(self, unit_type: str) -> float:
        """Price from the lowest floor pricing `unit_type` above zero, else 0."""
        for floor in self.floors:
            index = floor.index_of(unit_type)
            if index is not None and floor.unit_types[index].price > 0:
                return floor.unit_types[index].price
        return 0.0

    def prices_for(self, unit_type: str) -> List[float]:
        return [
            entry.price
            for floor in self.floors
            for entry in floor.unit_types
            if entry.type == unit_type
        ]

    # --- Mutations (each returns a new grid) --------------------------------

    def _replace_floor(self, floor: FloorConfig) -> "FloorGrid":
        floors = list(self.floors)
        floors[floor.floor_number - 1] = floor
        return FloorGrid(floors=tuple(floors))

    def set_total_floors(
        self, total_floors: int, default_entry: UnitTypeCount, max_floors: int
    ) -> "FloorGrid":
        """
        Grow or shrink the building to `total_floors` floors.

        New floors copy floor 1's unit-type mix, or hold `default_entry` when
        the grid has no floors yet. Shrinking drops the highest floors.
        """
        validate_count(total_floors, field="total_floors", minimum=1)
        if total_floors > max_floors:
            raise ValidationError(
                f"must be less than or equal to {max_floors}",
                field="total_floors",
                value=total_floors,
            )

        current = len(self.floors)
        if total_floors == current:
            return self
        if total_floors < current:
            logger.debug(f"Removing floors {total_floors + 1}..{current}")
            return FloorGrid(floors=self.floors[:total_floors])

        template_entries = (
            self.floors[0].unit_types if self.floors and self.floors[0].unit_types else (default_entry,)
        )
        added = tuple(
            FloorConfig(floor_number=number, unit_types=tuple(template_entries))
            for number in range(current + 1, total_floors + 1)
        )
        logger.debug(f"Adding floors {current + 1}..{total_floors}")
        return FloorGrid(floors=self.floors + added)

    def add_or_increment(self, floor_number: int, unit_type: str) -> "FloorGrid":
        """Increment `unit_type` on the floor, or append it with count 1 and price 0."""
        validate_unit_type(unit_type)
        floor = self.floor(floor_number)
        entries = list(floor.unit_types)
        index = floor.index_of(unit_type)
        if index is None:
            entries.append(UnitTypeCount(type=unit_type, count=1, price=0.0))
        else:
            entries[index] = entries[index].evolve(count=entries[index].count + 1)
        return self._replace_floor(floor.with_entries(entries))

    def set_count(
        self,
        floor_number: int,
        unit_type: str,
        count: int,
        default_entry: UnitTypeCount,
    ) -> "FloorGrid":
        """
        Set the number of `unit_type` units on a floor.

        A count of 0 removes the entry; if that empties the floor,
        `default_entry` takes its place.
        """
        validate_unit_type(unit_type)
        validate_count(count, field="count", minimum=0)
        floor = self.floor(floor_number)
        entries = list(floor.unit_types)
        index = floor.index_of(unit_type)

        if count == 0:
            if index is None:
                return self
            del entries[index]
        elif index is None:
            entries.append(UnitTypeCount(type=unit_type, count=count, price=0.0))
        else:
            entries[index] = entries[index].evolve(count=count)

        return self._replace_floor(floor.with_entries(entries or [default_entry]))

    def remove_entry(
        self, floor_number: int, index: int, default_entry: UnitTypeCount
    ) -> "FloorGrid":
        floor = self.floor(floor_number)
        floor.entry(index)
        entries = [entry for position, entry in enumerate(floor.unit_types) if position != index]
        return self._replace_floor(floor.with_entries(entries or [default_entry]))

    def change_type(self, floor_number: int, index: int, new_type: str) -> "FloorGrid":
        """Replace the type of one entry in place, keeping its count and price."""
        validate_unit_type(new_type, field="new_type")
        floor = self.floor(floor_number)
        entry = floor.entry(index)
        if entry.type == new_type:
            return self
        if floor.index_of(new_type) is not None:
            raise ValidationError(
                f"unit type '{new_type}' already exists on floor {floor_number}",
                field="new_type",
                value=new_type,
            )
        entries = list(floor.unit_types)
        entries[index] = entry.evolve(type=new_type)
        return self._replace_floor(floor.with_entries(entries))

    def set_entry_price(self, floor_number: int, index: int, price: float) -> "FloorGrid":
        price = validate_non_negative(price, field="price")
        floor = self.floor(floor_number)
        entry = floor.entry(index)
        if entry.price == price:
            return self
        entries = list(floor.unit_types)
        entries[index] = entry.evolve(price=price)
        return self._replace_floor(floor.with_entries(entries))

    def set_type_price(self, unit_type: str, price: float) -> "FloorGrid":
        """Set the price of every entry of `unit_type` on every floor."""
        price = validate_non_negative(price, field="price")
        floors = []
        changed = False
        for floor in self.floors:
            entries = []
            for entry in floor.unit_types:
                if entry.type == unit_type and entry.price != price:
                    entry = entry.evolve(price=price)
                    changed = True
                entries.append(entry)
            floors.append(floor.with_entries(entries))
        if not changed:
            return self
        return FloorGrid(floors=tuple(floors))

    def copy_floor(self, source: int, target: int) -> "FloorGrid":
        """Copy the unit-type mix of `source` onto `target`."""
        source_floor = self.floor(source)
        target_floor = self.floor(target)
        if source == target:
            return self
        return self._replace_floor(
            target_floor.with_entries([entry.evolve() for entry in source_floor.unit_types])
        )

    def apply_to_all_floors(self, source: int) -> "FloorGrid":
        """Copy the unit-type mix of `source` onto every floor."""
        source_floor = self.floor(source)
        return FloorGrid(
            floors=tuple(
                floor.with_entries([entry.evolve() for entry in source_floor.unit_types])
                for floor in self.floors
            )
        )

