# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit-type catalogs: default bedrooms, bathrooms, area and labels per
unit-type code, with built-in residential and office catalogs.
"""

from .catalog import (
    OFFICE_CATALOG,
    RESIDENTIAL_CATALOG,
    UnitTypeCatalog,
    UnitTypeDefaults,
    catalog_for,
    estimate_area,
)

__all__ = [
    "OFFICE_CATALOG",
    "RESIDENTIAL_CATALOG",
    "UnitTypeCatalog",
    "UnitTypeDefaults",
    "catalog_for",
    "estimate_area",
]
