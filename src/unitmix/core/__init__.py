# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unitmix Core Framework

Foundational primitives used by the catalog, numbering, building,
derivation and commit packages.
"""

from . import primitives
from .primitives import (
    BuildingTypeEnum,
    CollaboratorError,
    CommitStage,
    DerivationError,
    EngineSettings,
    IdGenerator,
    Model,
    NotFoundError,
    PermissionDeniedError,
    SequentialIdGenerator,
    SyncStatus,
    UnitMixError,
    UUIDIdGenerator,
    ValidationError,
)

__all__ = [
    "primitives",
    "BuildingTypeEnum",
    "CollaboratorError",
    "CommitStage",
    "DerivationError",
    "EngineSettings",
    "IdGenerator",
    "Model",
    "NotFoundError",
    "PermissionDeniedError",
    "SequentialIdGenerator",
    "SyncStatus",
    "UnitMixError",
    "UUIDIdGenerator",
    "ValidationError",
]
