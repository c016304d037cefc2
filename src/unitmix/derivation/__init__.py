# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Listing derivation: one listing per unit type, aggregated across floors.
"""

from .listing import DerivedListing, UnitsOnFloor, derive_listings

__all__ = [
    "DerivedListing",
    "UnitsOnFloor",
    "derive_listings",
]
