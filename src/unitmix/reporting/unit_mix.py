# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit-mix tables.

`UnitMixReport` lays the floor grid out the way building schedules are
usually shown: floors as rows, unit types as columns, unit counts in the
cells, with a total column and a total row. `listings_frame` gives one
row per derived listing.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import pandas as pd

from ..building.state import BuildingState
from ..derivation import DerivedListing
from .base import BaseReport

TOTAL_LABEL = "Total"

LISTING_COLUMNS = [
    "unit_type",
    "title",
    "price",
    "total_units",
    "floors",
    "bedrooms",
    "bathrooms",
    "area",
    "images",
    "has_template",
]


class UnitMixReport(BaseReport):
    """
    Floor-by-unit-type pivot of a building's floor grid.

    Example:
        ```python
        table = UnitMixReport(editor.state).generate()
        table.loc[2, "2BR"]          # units of type 2BR on floor 2
        table.loc["Total", "Total"]  # all units in the building
        ```
    """

    def generate(
        self,
        values: str = "count",
        include_totals: bool = True,
        unit_types: Optional[List[str]] = None,
    ) -> pd.DataFrame:
        """
        Build the pivot table.

        Args:
            values: "count" for unit counts or "price" for floor prices
            include_totals: Add a total column and a total row (counts only)
            unit_types: Restrict columns to these unit types

        Returns:
            DataFrame indexed by floor number with one column per unit type
        """
        if values not in ("count", "price"):
            raise ValueError(f"values must be 'count' or 'price', got {values!r}")

        records = self._prepare_records(unit_types)
        columns = [t for t in self._state.floors.unit_types() if not unit_types or t in unit_types]
        floors = [floor.floor_number for floor in self._state.floors.floors]

        if records.empty:
            pivot_df = pd.DataFrame(0.0, index=floors, columns=columns)
        else:
            pivot_df = records.pivot_table(
                index="floor",
                columns="unit_type",
                values=values,
                aggfunc="sum",
                fill_value=0,
            )
            pivot_df = pivot_df.reindex(index=floors, columns=columns, fill_value=0)
        pivot_df.index.name = "floor"
        pivot_df.columns.name = "unit_type"

        if include_totals and values == "count":
            pivot_df = self._add_totals(pivot_df)
        return pivot_df

    def _prepare_records(self, unit_types: Optional[List[str]]) -> pd.DataFrame:
        rows = [
            {
                "floor": floor.floor_number,
                "unit_type": entry.type,
                "count": entry.count,
                "price": entry.price,
            }
            for floor in self._state.floors.floors
            for entry in floor.unit_types
            if not unit_types or entry.type in unit_types
        ]
        return pd.DataFrame(rows, columns=["floor", "unit_type", "count", "price"])

    def _add_totals(self, pivot_df: pd.DataFrame) -> pd.DataFrame:
        result = pivot_df.copy()
        result[TOTAL_LABEL] = result.sum(axis=1)
        totals = result.sum(axis=0).to_frame().T
        totals.index = [TOTAL_LABEL]
        result = pd.concat([result, totals])
        result.index.name = "floor"
        return result


def unit_mix_frame(state: BuildingState, include_totals: bool = True) -> pd.DataFrame:
    """Unit counts by floor (rows) and unit type (columns)."""
    return UnitMixReport(state).generate(include_totals=include_totals)


def listings_frame(listings: Sequence[DerivedListing]) -> pd.DataFrame:
    """One row per derived listing, in listing order."""
    rows = [
        {
            "unit_type": listing.unit_type,
            "title": listing.title,
            "price": listing.price,
            "total_units": listing.total_unit_count,
            "floors": ", ".join(str(floor) for floor in listing.floors),
            "bedrooms": listing.bedroom_count,
            "bathrooms": listing.bathroom_count,
            "area": listing.area,
            "images": len(listing.media),
            "has_template": listing.has_template,
        }
        for listing in listings
    ]
    return pd.DataFrame(rows, columns=LISTING_COLUMNS)
