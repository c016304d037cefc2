# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Mutation commands for a building edit session.

Each command is an immutable value describing one edit. Applying a
command is a pure function `(state, command) -> state'` implemented by
`SynchronizationController.apply`, which folds the reciprocal floor and
template updates into the same step.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple, Union

# --- Floor grid -------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SetTotalFloors:
    total_floors: int


@dataclass(frozen=True, slots=True)
class AddOrIncrement:
    floor: int
    unit_type: str


@dataclass(frozen=True, slots=True)
class SetCount:
    floor: int
    unit_type: str
    count: int


@dataclass(frozen=True, slots=True)
class ChangeType:
    floor: int
    index: int
    new_type: str


@dataclass(frozen=True, slots=True)
class SetFloorPrice:
    """Set one floor entry's price; positive prices propagate to the template."""

    floor: int
    index: int
    price: float


@dataclass(frozen=True, slots=True)
class RemoveEntry:
    floor: int
    index: int


@dataclass(frozen=True, slots=True)
class CopyFloor:
    source: int
    target: int


@dataclass(frozen=True, slots=True)
class ApplyToAllFloors:
    source: int


# --- Templates & media ------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SetTemplatePrice:
    """Set a unit type's authoritative price on its template and every floor."""

    unit_type: str
    price: float


@dataclass(frozen=True, slots=True)
class UpdateTemplate:
    """Partial template update; keys are `UnitTypeTemplate` field names."""

    unit_type: str
    changes: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class AddImage:
    unit_type: str
    url: str
    category: str = "general"
    is_primary: bool = False
    image_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class RemoveImage:
    unit_type: str
    image_id: str


@dataclass(frozen=True, slots=True)
class SetPrimaryImage:
    unit_type: str
    image_id: str


@dataclass(frozen=True, slots=True)
class ReorderImages:
    unit_type: str
    image_ids: Tuple[str, ...]


# --- Unit registry ----------------------------------------------------------


@dataclass(frozen=True, slots=True)
class GenerateUnits:
    """Expand the floor grid into individual units (only if none exist yet)."""

    pass


@dataclass(frozen=True, slots=True)
class AddUnit:
    floor: int
    unit_type: str
    is_available: bool = True


@dataclass(frozen=True, slots=True)
class BulkAddUnits:
    floor: int
    unit_type: str
    count: int


@dataclass(frozen=True, slots=True)
class RemoveUnit:
    unit_id: str


@dataclass(frozen=True, slots=True)
class UpdateUnit:
    unit_id: str
    changes: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ReconcileUnits:
    pass


# --- Building metadata ------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SetBuildingInfo:
    name: Optional[str] = None
    location: Optional[str] = None


@dataclass(frozen=True, slots=True)
class AssignBuilding:
    """Record the persisted building id; unit codes switch from placeholders to real codes."""

    building_id: str


Command = Union[
    SetTotalFloors,
    AddOrIncrement,
    SetCount,
    ChangeType,
    SetFloorPrice,
    RemoveEntry,
    CopyFloor,
    ApplyToAllFloors,
    SetTemplatePrice,
    UpdateTemplate,
    AddImage,
    RemoveImage,
    SetPrimaryImage,
    ReorderImages,
    GenerateUnits,
    AddUnit,
    BulkAddUnits,
    RemoveUnit,
    UpdateUnit,
    ReconcileUnits,
    SetBuildingInfo,
    AssignBuilding,
]
