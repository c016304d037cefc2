# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Optional

from pydantic import Field, model_validator

from .enums import BuildingTypeEnum
from .model import Model
from .types import PositiveIntGe1


class NumberingSettings(Model):
    """Settings for unit-code generation."""

    placeholder_prefix: str = Field(
        default="TEMP",
        pattern=r"^[A-Z]+$",
        description="Tag used for unit codes issued before the building is persisted.",
    )
    max_floors: PositiveIntGe1 = Field(
        default=99, le=99, description="Highest floor number a unit code can carry."
    )
    max_units_per_floor: PositiveIntGe1 = Field(
        default=999, le=999, description="Highest sequence a unit code can carry."
    )


class CommitSettings(Model):
    """Settings for the commit pipeline."""

    currency_minor_units: PositiveIntGe1 = Field(
        default=100,
        description="Multiplier applied to prices when writing records (prices are stored in cents).",
    )
    rollback_on_failure: bool = Field(
        default=True,
        description=(
            "If True, records written by a failed commit are removed again "
            "through the persistence gateway before the failure is raised."
        ),
    )


class EngineSettings(Model):
    """Engine settings

    Configures the behaviour of a building edit session. A single instance is
    shared by the editor, the derivation step and the commit pipeline.

    Usage Examples:
        # Residential building (default)
        settings = EngineSettings()

        # Office building with a different default unit type
        settings = EngineSettings(
            building_type=BuildingTypeEnum.OFFICE,
            default_unit_type="PrivateOffice",
        )
    """

    building_type: BuildingTypeEnum = BuildingTypeEnum.APARTMENT
    default_unit_type: Optional[str] = Field(
        default=None,
        description=(
            "Unit type used to fill a floor that would otherwise be empty. "
            "Defaults to the first code of the building type's catalog."
        ),
    )
    default_min_lease_term: PositiveIntGe1 = Field(
        default=1, description="Minimum lease term (months) for new templates."
    )
    numbering: NumberingSettings = Field(default_factory=NumberingSettings)
    commit: CommitSettings = Field(default_factory=CommitSettings)

    @model_validator(mode="after")
    def _check_default_unit_type(self) -> "EngineSettings":
        if self.default_unit_type is not None and not self.default_unit_type.strip():
            raise ValueError("default_unit_type must not be blank")
        return self
