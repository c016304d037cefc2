# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Individual unit registry.

An optional, flat expansion of the floor grid into one record per physical
unit. The registry is a snapshot: it is generated from the floor grid once
and afterwards edited unit by unit. `reconcile()` brings it back in line
with the floor counts on request, and the commit pipeline always persists
the reconciled registry.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import Field, field_validator

from ..core.primitives import (
    FloorNumber,
    IdGenerator,
    Model,
    Money,
    NotFoundError,
    UnitTypeCode,
    ValidationError,
    validate_count,
    validate_unit_type,
)
from ..numbering import UnitNumberGenerator
from .floors import FloorGrid

logger = logging.getLogger(__name__)

# Fields callers may change through `update`; identity and position are
# owned by the registry.
UPDATABLE_FIELDS = frozenset({"type", "is_available", "sync_with_template", "price"})


class UnitAssignment(Model):
    """
    One physical unit.

    Attributes:
        id: Stable identifier from the session's id generator
        unit_code: Placeholder or real unit code (unique within the building)
        floor_number: Floor the unit is on
        type: Unit-type code
        is_available: Whether the unit can currently be let
        sync_with_template: If True the unit follows its template's price
        price: Unit-specific price, only used when not synced with the template
    """

    id: str = Field(min_length=1)
    unit_code: str = Field(min_length=1)
    floor_number: FloorNumber
    type: UnitTypeCode
    is_available: bool = True
    sync_with_template: bool = True
    price: Optional[Money] = None


class UnitStats(Model):
    total: int
    available: int
    synced: int

    @property
    def occupied(self) -> int:
        return self.total - self.available


class UnitRegistry(Model):
    """Ordered collection of `UnitAssignment` records."""

    units: Tuple[UnitAssignment, ...] = Field(default_factory=tuple)

    @field_validator("units")
    @classmethod
    def _validate_unique(cls, units: Tuple[UnitAssignment, ...]) -> Tuple[UnitAssignment, ...]:
        ids = [unit.id for unit in units]
        if len(ids) != len(set(ids)):
            raise ValueError("Unit ids must be unique within a building")
        codes = [unit.unit_code for unit in units]
        duplicates = sorted({code for code in codes if codes.count(code) > 1})
        if duplicates:
            raise ValueError(f"Unit codes must be unique within a building: {duplicates}")
        return units

    def __len__(self) -> int:
        return len(self.units)

    def __iter__(self):
        return iter(self.units)

    @property
    def is_empty(self) -> bool:
        return not self.units

    def get(self, unit_id: str) -> UnitAssignment:
        for unit in self.units:
            if unit.id == unit_id:
                return unit
        raise NotFoundError("Unit", unit_id)

    def on_floor(self, floor_number: int) -> List[UnitAssignment]:
        return [unit for unit in self.units if unit.floor_number == floor_number]

    def by_floor(self) -> Dict[int, List[UnitAssignment]]:
        grouped: Dict[int, List[UnitAssignment]] = {}
        for unit in self.units:
            grouped.setdefault(unit.floor_number, []).append(unit)
        return dict(sorted(grouped.items()))

    def stats(self) -> UnitStats:
        return UnitStats(
            total=len(self.units),
            available=sum(1 for unit in self.units if unit.is_available),
            synced=sum(1 for unit in self.units if unit.sync_with_template),
        )

    # --- Generation ---------------------------------------------------------

    @classmethod
    def expand_from_floors(
        cls, grid: FloorGrid, generator: UnitNumberGenerator, ids: IdGenerator
    ) -> "UnitRegistry":
        """One unit per counted unit in the grid, numbered per floor in entry order."""
        units = []
        for floor in grid.floors:
            sequence = 0
            for entry in floor.unit_types:
                for _ in range(entry.count):
                    sequence += 1
                    units.append(
                        UnitAssignment(
                            id=ids.next(),
                            unit_code=generator.code_for(floor.floor_number, sequence),
                            floor_number=floor.floor_number,
                            type=entry.type,
                        )
                    )
        logger.debug(f"Expanded {len(units)} units from {grid.total_floors} floors")
        return cls(units=tuple(units))

    def _next_sequence(self, floor_number: int, generator: UnitNumberGenerator) -> int:
        sequences = [generator.decode(unit.unit_code).sequence for unit in self.on_floor(floor_number)]
        return max(sequences, default=0) + 1

    def add(
        self,
        floor_number: int,
        unit_type: str,
        generator: UnitNumberGenerator,
        ids: IdGenerator,
        is_available: bool = True,
    ) -> Tuple["UnitRegistry", UnitAssignment]:
        """Append one unit after the last unit on its floor."""
        validate_unit_type(unit_type)
        unit = UnitAssignment(
            id=ids.next(),
            unit_code=generator.code_for(
                floor_number, self._next_sequence(floor_number, generator)
            ),
            floor_number=floor_number,
            type=unit_type,
            is_available=is_available,
        )
        return UnitRegistry(units=self.units + (unit,)), unit

    def bulk_add(
        self,
        floor_number: int,
        unit_type: str,
        count: int,
        generator: UnitNumberGenerator,
        ids: IdGenerator,
    ) -> "UnitRegistry":
        validate_count(count, field="count", minimum=1)
        registry = self
        for _ in range(count):
            registry, _unit = registry.add(floor_number, unit_type, generator, ids)
        return registry

    # --- Removal & editing --------------------------------------------------

    def remove(self, unit_id: str, generator: UnitNumberGenerator) -> "UnitRegistry":
        """
        Remove a unit and renumber the remaining units on its floor.

        Units on other floors keep their codes.
        """
        removed = self.get(unit_id)
        floor_units = generator.renumber(
            [unit for unit in self.on_floor(removed.floor_number) if unit.id != unit_id]
        )
        renumbered = {unit.id: unit for unit in floor_units}
        units = tuple(
            renumbered.get(unit.id, unit) for unit in self.units if unit.id != unit_id
        )
        logger.debug(
            f"Removed unit {removed.unit_code}; renumbered {len(floor_units)} units "
            f"on floor {removed.floor_number}"
        )
        return UnitRegistry(units=units)

    def update(self, unit_id: str, **changes: Any) -> "UnitRegistry":
        unknown = sorted(set(changes) - UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(
                f"cannot be changed through update (allowed: {sorted(UPDATABLE_FIELDS)})",
                field=unknown[0],
                value=changes[unknown[0]],
            )
        if "type" in changes:
            validate_unit_type(changes["type"])
        current = self.get(unit_id)
        updated = current.evolve(**changes)
        if updated == current:
            return self
        return UnitRegistry(
            units=tuple(updated if unit.id == unit_id else unit for unit in self.units)
        )

    def drop_floors_above(self, total_floors: int) -> "UnitRegistry":
        kept = tuple(unit for unit in self.units if unit.floor_number <= total_floors)
        if len(kept) == len(self.units):
            return self
        logger.debug(f"Dropped {len(self.units) - len(kept)} units above floor {total_floors}")
        return UnitRegistry(units=kept)

    def renumbered(self, generator: UnitNumberGenerator) -> "UnitRegistry":
        """All units re-coded by `generator`, floor sequences contiguous from 1."""
        return UnitRegistry(units=tuple(generator.renumber(self.units)))

    def reconcile(
        self, grid: FloorGrid, generator: UnitNumberGenerator, ids: IdGenerator
    ) -> "UnitRegistry":
        """
        Bring the registry in line with the floor grid's counts.

        For each floor and unit type the first `count` existing units are
        kept (with their ids, availability and pricing flags), missing
        units are created, surplus units and units on floors that no longer
        exist are dropped. The result is ordered by floor, then by the
        floor's entry order, and renumbered.
        """
        pools: Dict[Tuple[int, str], List[UnitAssignment]] = {}
        for unit in self.units:
            pools.setdefault((unit.floor_number, unit.type), []).append(unit)

        units = []
        created = 0
        for floor in grid.floors:
            for entry in floor.unit_types:
                existing = pools.get((floor.floor_number, entry.type), [])
                units.extend(existing[: entry.count])
                for _ in range(entry.count - len(existing[: entry.count])):
                    created += 1
                    units.append(
                        UnitAssignment(
                            id=ids.next(),
                            # Unique placeholder until renumbering below
                            unit_code=f"new-{created}",
                            floor_number=floor.floor_number,
                            type=entry.type,
                        )
                    )

        reconciled = UnitRegistry(units=tuple(generator.renumber(units)))
        logger.debug(
            f"Reconciled unit registry: {len(self.units)} -> {len(reconciled)} units "
            f"({created} created)"
        )
        return reconciled
