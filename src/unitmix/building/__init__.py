# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Building model and edit session.

Three in-memory stores describe one building:

- the floor grid (unit-type quantities and per-floor prices),
- the unit-type templates (descriptive data and authoritative price),
- the individual unit registry (one record per physical unit).

`SynchronizationController` is the single mutation path over all three and
`BuildingEditor` wraps it in a mutable session.
"""

from .commands import (
    AddImage,
    AddOrIncrement,
    AddUnit,
    ApplyToAllFloors,
    AssignBuilding,
    BulkAddUnits,
    ChangeType,
    Command,
    CopyFloor,
    GenerateUnits,
    ReconcileUnits,
    RemoveEntry,
    RemoveImage,
    RemoveUnit,
    ReorderImages,
    SetBuildingInfo,
    SetCount,
    SetFloorPrice,
    SetPrimaryImage,
    SetTemplatePrice,
    SetTotalFloors,
    UpdateTemplate,
    UpdateUnit,
)
from .editor import BuildingEditor
from .floors import FloorConfig, FloorGrid, UnitTypeCount
from .state import BuildingState
from .summary import BuildingSummary, UnitTypeBreakdown, calculate_building_summary
from .sync import SynchronizationController
from .templates import (
    CategorizedImage,
    SubRoomDetail,
    TemplateStore,
    UnitTypeTemplate,
    listing_description,
    listing_title,
)
from .units import UnitAssignment, UnitRegistry, UnitStats

__all__ = [
    # Stores
    "FloorConfig",
    "FloorGrid",
    "UnitTypeCount",
    "CategorizedImage",
    "SubRoomDetail",
    "TemplateStore",
    "UnitTypeTemplate",
    "UnitAssignment",
    "UnitRegistry",
    "UnitStats",
    "BuildingState",
    "listing_title",
    "listing_description",

    # Synchronization
    "SynchronizationController",
    "BuildingEditor",

    # Summary
    "BuildingSummary",
    "UnitTypeBreakdown",
    "calculate_building_summary",

    # Commands
    "Command",
    "AddImage",
    "AddOrIncrement",
    "AddUnit",
    "ApplyToAllFloors",
    "AssignBuilding",
    "BulkAddUnits",
    "ChangeType",
    "CopyFloor",
    "GenerateUnits",
    "ReconcileUnits",
    "RemoveEntry",
    "RemoveImage",
    "RemoveUnit",
    "ReorderImages",
    "SetBuildingInfo",
    "SetCount",
    "SetFloorPrice",
    "SetPrimaryImage",
    "SetTemplatePrice",
    "SetTotalFloors",
    "UpdateTemplate",
    "UpdateUnit",
]
