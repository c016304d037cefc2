# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from enum import Enum


class BuildingTypeEnum(str, Enum):
    """
    Category of building being configured.

    The building type selects which unit-type catalog supplies defaults.

    Options:
        APARTMENT: Multi-unit residential building (monthly rent)
        HOSTEL: Student/shared residential building (rent per semester)
        OFFICE: Commercial building with desks, offices and suites
    """

    APARTMENT = "apartment"
    HOSTEL = "hostel"
    OFFICE = "office"


class ImageCategoryEnum(str, Enum):
    """Gallery categories offered for unit-type media."""

    GENERAL = "general"
    LIVING_ROOM = "living_room"
    BEDROOM = "bedroom"
    KITCHEN = "kitchen"
    BATHROOM = "bathroom"
    BALCONY = "balcony"
    EXTERIOR = "exterior"
    WORKSPACE = "workspace"
    FLOOR_PLAN = "floor_plan"


class SyncStatus(str, Enum):
    """
    Per unit-type synchronization state.

    A price change moves its unit type to DIRTY; propagation between the
    floor grid and the template returns it to CLEAN before the mutating
    call returns, so callers only ever observe CLEAN.
    """

    CLEAN = "clean"
    DIRTY = "dirty"


class CommitStage(str, Enum):
    """
    Ordered stages of the commit pipeline.

    Collaborator failures are reported with the stage they happened in so
    callers can decide whether to retry the whole commit.
    """

    IDENTITY = "identity"
    BLOCK = "block"
    LISTING = "listing"
    UNIT = "unit"
    IMAGE = "image"
    UPLOAD = "upload"
    LOAD = "load"
    ROLLBACK = "rollback"


def enum_to_string(value) -> str:
    """
    Convert enum values to their string representation for pandas storage.

    Examples:
        >>> enum_to_string(BuildingTypeEnum.OFFICE)
        'office'
        >>> enum_to_string("already_string")
        'already_string'
    """
    if isinstance(value, Enum):
        return value.value
    return str(value)
