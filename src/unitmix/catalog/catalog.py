# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit-type catalogs.

A catalog maps a unit-type code ("Studio", "2BR", "PrivateOffice", ...) to
default specifications and a display label. Catalogs are plain
configuration data: a building category gets its own catalog, and catalogs
can be loaded from mappings without code changes.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import Field, model_validator

from ..core.primitives import BuildingTypeEnum, Model, PositiveFloat, PositiveInt

# Fallback for codes a catalog does not know about
FALLBACK_BEDROOMS = 1
FALLBACK_BATHROOMS = 1
BASE_AREA = 40.0
AREA_PER_BEDROOM = 20.0


def estimate_area(bedrooms: int) -> float:
    """Area estimate (m²) used when a catalog entry gives none."""
    return BASE_AREA + bedrooms * AREA_PER_BEDROOM


class UnitTypeDefaults(Model):
    """
    Default specifications for one unit type.

    Attributes:
        code: Unit-type code (catalog key)
        label: Human-readable label (e.g., "2 Bedroom")
        bedrooms: Default number of bedrooms
        bathrooms: Default number of bathrooms
        area_estimate: Default area in m²
        desk_capacity: Workstations included (office unit types only)
    """

    code: str = Field(min_length=1)
    label: str = Field(min_length=1)
    bedrooms: PositiveInt = FALLBACK_BEDROOMS
    bathrooms: PositiveInt = FALLBACK_BATHROOMS
    area_estimate: Optional[PositiveFloat] = None
    desk_capacity: Optional[PositiveInt] = None

    @model_validator(mode="before")
    @classmethod
    def _fill_area(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("area_estimate") is None:
            bedrooms = data.get("bedrooms", FALLBACK_BEDROOMS)
            if isinstance(bedrooms, int) and not isinstance(bedrooms, bool):
                data = {**data, "area_estimate": estimate_area(bedrooms)}
        return data


class UnitTypeCatalog(Model):
    """
    Registry of unit types for one building category.

    `defaults_for` is total: codes missing from the catalog resolve to
    bedrooms=1, bathrooms=1, area = 40 + bedrooms×20 and use the code
    itself as label, so buildings keep working after new unit types are
    introduced.

    Example:
        ```python
        catalog = UnitTypeCatalog.from_mapping(
            "coworking",
            {"HotDesk": {"label": "Hot Desk", "bedrooms": 0, "area_estimate": 5}},
        )
        catalog.defaults_for("HotDesk").label  # "Hot Desk"
        catalog.defaults_for("Unknown").bedrooms  # 1
        ```
    """

    name: str
    entries: Tuple[UnitTypeDefaults, ...] = Field(min_length=1)

    @model_validator(mode="after")
    def _validate_unique_codes(self) -> "UnitTypeCatalog":
        codes = [entry.code for entry in self.entries]
        duplicates = sorted({code for code in codes if codes.count(code) > 1})
        if duplicates:
            raise ValueError(
                f"Catalog '{self.name}' defines unit types more than once: {duplicates}"
            )
        return self

    @classmethod
    def from_mapping(
        cls, name: str, mapping: Mapping[str, Mapping[str, Any]]
    ) -> "UnitTypeCatalog":
        """
        Build a catalog from configuration data.

        Args:
            name: Catalog name (e.g., "residential")
            mapping: Unit-type code -> field overrides. Missing labels default
                to the code.

        Returns:
            UnitTypeCatalog preserving the mapping's order
        """
        entries = []
        for code, values in mapping.items():
            data: Dict[str, Any] = {"label": code, **dict(values), "code": code}
            entries.append(UnitTypeDefaults.model_validate(data))
        return cls(name=name, entries=tuple(entries))

    def _index(self) -> Dict[str, UnitTypeDefaults]:
        return {entry.code: entry for entry in self.entries}

    def __contains__(self, code: object) -> bool:
        return code in self._index()

    def codes(self) -> List[str]:
        """Unit-type codes in declaration order."""
        return [entry.code for entry in self.entries]

    @property
    def default_code(self) -> str:
        """First code of the catalog; used to fill otherwise empty floors."""
        return self.entries[0].code

    def defaults_for(self, code: str) -> UnitTypeDefaults:
        """Return the defaults for `code`, falling back for unknown codes."""
        entry = self._index().get(code)
        if entry is not None:
            return entry
        return UnitTypeDefaults(
            code=code,
            label=code,
            bedrooms=FALLBACK_BEDROOMS,
            bathrooms=FALLBACK_BATHROOMS,
        )

    def label_for(self, code: str) -> str:
        return self.defaults_for(code).label


RESIDENTIAL_CATALOG = UnitTypeCatalog.from_mapping(
    "residential",
    {
        "Studio": {"label": "Studio", "bedrooms": 0, "bathrooms": 1},
        "1BR": {"label": "1 Bedroom", "bedrooms": 1, "bathrooms": 1},
        "2BR": {"label": "2 Bedroom", "bedrooms": 2, "bathrooms": 2},
        "3BR": {"label": "3 Bedroom", "bedrooms": 3, "bathrooms": 2},
        "4BR": {"label": "4 Bedroom", "bedrooms": 4, "bathrooms": 3},
        "Penthouse": {"label": "Penthouse", "bedrooms": 4, "bathrooms": 3},
    },
)

OFFICE_CATALOG = UnitTypeCatalog.from_mapping(
    "office",
    {
        "HotDesk": {"label": "Hot Desk", "bedrooms": 0, "bathrooms": 0, "area_estimate": 5.0, "desk_capacity": 1},
        "DedicatedDesk": {"label": "Dedicated Desk", "bedrooms": 0, "bathrooms": 0, "area_estimate": 8.0, "desk_capacity": 1},
        "PrivateOffice": {"label": "Private Office", "bedrooms": 0, "bathrooms": 0, "area_estimate": 20.0, "desk_capacity": 4},
        "TeamSuite": {"label": "Team Suite", "bedrooms": 0, "bathrooms": 1, "area_estimate": 60.0, "desk_capacity": 12},
        "ExecutiveOffice": {"label": "Executive Office", "bedrooms": 0, "bathrooms": 1, "area_estimate": 35.0, "desk_capacity": 2},
        "ConferenceRoom": {"label": "Conference Room", "bedrooms": 0, "bathrooms": 0, "area_estimate": 30.0},
        "OpenSpace": {"label": "Open Space", "bedrooms": 0, "bathrooms": 2, "area_estimate": 120.0, "desk_capacity": 30},
        "VirtualOffice": {"label": "Virtual Office", "bedrooms": 0, "bathrooms": 0, "area_estimate": 0.0},
    },
)

_CATALOGS_BY_BUILDING_TYPE = {
    BuildingTypeEnum.APARTMENT: RESIDENTIAL_CATALOG,
    BuildingTypeEnum.HOSTEL: RESIDENTIAL_CATALOG,
    BuildingTypeEnum.OFFICE: OFFICE_CATALOG,
}


def catalog_for(building_type: BuildingTypeEnum) -> UnitTypeCatalog:
    """Return the built-in catalog for a building category."""
    return _CATALOGS_BY_BUILDING_TYPE[BuildingTypeEnum(building_type)]
