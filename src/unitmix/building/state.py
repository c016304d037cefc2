# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Optional

from pydantic import Field

from ..core.primitives import BuildingTypeEnum, Model
from .floors import FloorGrid
from .templates import TemplateStore
from .units import UnitRegistry


class BuildingState(Model):
    """
    Immutable snapshot of one building being edited.

    Every command takes a `BuildingState` and returns the next one; the
    floor grid, templates and unit registry are never mutated in place.

    Attributes:
        building_id: Persisted identifier, None until the first commit
        building_code: 4-digit code derived from `building_id`, used in unit codes
        name: Building name (used in auto-generated listing titles)
        location: Address or area (used in auto-generated descriptions)
        building_type: Category selecting the unit-type catalog
        floors: Per-floor unit-type counts and prices
        templates: One descriptive template per unit type
        units: Individual unit registry (may be empty)
    """

    building_id: Optional[str] = None
    building_code: Optional[int] = Field(default=None, ge=1000, le=9999)
    name: str = ""
    location: str = ""
    building_type: BuildingTypeEnum = BuildingTypeEnum.APARTMENT
    floors: FloorGrid = Field(default_factory=FloorGrid)
    templates: TemplateStore = Field(default_factory=TemplateStore)
    units: UnitRegistry = Field(default_factory=UnitRegistry)

    @property
    def is_persisted(self) -> bool:
        return self.building_id is not None

    def with_parts(
        self,
        floors: Optional[FloorGrid] = None,
        templates: Optional[TemplateStore] = None,
        units: Optional[UnitRegistry] = None,
    ) -> "BuildingState":
        """Replace stores without re-validating the untouched ones."""
        update = {}
        if floors is not None and floors is not self.floors:
            update["floors"] = floors
        if templates is not None and templates is not self.templates:
            update["templates"] = templates
        if units is not None and units is not self.units:
            update["units"] = units
        if not update:
            return self
        return self.model_copy(update=update)
