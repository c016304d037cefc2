# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unitmix Core Primitives

Essential building blocks shared by every unitmix component: the immutable
base model, constrained types, enums, settings, exceptions and id generators.
"""

from .enums import (
    BuildingTypeEnum,
    CommitStage,
    ImageCategoryEnum,
    SyncStatus,
    enum_to_string,
)
from .exceptions import (
    CollaboratorError,
    DerivationError,
    NotFoundError,
    PermissionDeniedError,
    UnitMixError,
    ValidationError,
)
from .ids import IdGenerator, SequentialIdGenerator, UUIDIdGenerator
from .model import Model
from .settings import CommitSettings, EngineSettings, NumberingSettings
from .types import (
    FloorNumber,
    Money,
    PositiveFloat,
    PositiveInt,
    PositiveIntGe1,
    UnitTypeCode,
)
from .validation import (
    validate_choice,
    validate_count,
    validate_non_negative,
    validate_range,
    validate_unit_type,
)

__all__ = [
    # Core model
    "Model",

    # Settings
    "EngineSettings",
    "NumberingSettings",
    "CommitSettings",

    # Enums
    "BuildingTypeEnum",
    "CommitStage",
    "ImageCategoryEnum",
    "SyncStatus",
    "enum_to_string",

    # Exceptions
    "UnitMixError",
    "ValidationError",
    "NotFoundError",
    "DerivationError",
    "PermissionDeniedError",
    "CollaboratorError",

    # Identifiers
    "IdGenerator",
    "SequentialIdGenerator",
    "UUIDIdGenerator",

    # Types
    "FloorNumber",
    "Money",
    "PositiveFloat",
    "PositiveInt",
    "PositiveIntGe1",
    "UnitTypeCode",

    # Validation
    "validate_choice",
    "validate_count",
    "validate_non_negative",
    "validate_range",
    "validate_unit_type",
]
