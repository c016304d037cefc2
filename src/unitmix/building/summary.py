# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Building summary statistics.

Aggregates a `BuildingState` into the totals an admin sees next to the
floor grid: floors, units, distinct unit types, and a per-type breakdown
with the price range across floors.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from ..core.primitives import Model
from .state import BuildingState


class UnitTypeBreakdown(Model):
    """Counts and price range of one unit type across the building."""

    unit_type: str
    total_units: int
    floors: List[int]
    min_price: float
    max_price: float
    template_price: Optional[float] = None

    @property
    def price(self) -> float:
        """Effective listing price: positive template price, else the floor maximum."""
        if self.template_price:
            return self.template_price
        return self.max_price


class BuildingSummary(Model):
    total_floors: int
    total_units: int
    unit_type_count: int
    units_per_floor: Dict[int, int]
    breakdown: List[UnitTypeBreakdown]
    registered_units: int
    available_units: int

    @property
    def average_units_per_floor(self) -> float:
        if not self.total_floors:
            return 0.0
        return self.total_units / self.total_floors


def calculate_building_summary(state: BuildingState) -> BuildingSummary:
    """
    Summarize a building snapshot.

    Example:
        ```python
        summary = calculate_building_summary(editor.state)
        summary.total_units        # 24
        summary.breakdown[0].price  # 1_000_000.0
        ```
    """
    breakdown = []
    for unit_type in state.floors.unit_types():
        prices = state.floors.prices_for(unit_type)
        template = state.templates.get(unit_type)
        breakdown.append(
            UnitTypeBreakdown(
                unit_type=unit_type,
                total_units=state.floors.counts_by_type()[unit_type],
                floors=[
                    floor.floor_number
                    for floor in state.floors.floors
                    if floor.index_of(unit_type) is not None
                ],
                min_price=min(prices),
                max_price=max(prices),
                template_price=template.price if template is not None else None,
            )
        )

    stats = state.units.stats()
    return BuildingSummary(
        total_floors=state.floors.total_floors,
        total_units=state.floors.total_units,
        unit_type_count=len(breakdown),
        units_per_floor={
            floor.floor_number: floor.total_units for floor in state.floors.floors
        },
        breakdown=breakdown,
        registered_units=stats.total,
        available_units=stats.available,
    )
