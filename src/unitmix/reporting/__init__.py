# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Reporting: pandas tables over building snapshots and derived listings.
"""

from .base import BaseReport
from .unit_mix import UnitMixReport, listings_frame, unit_mix_frame

__all__ = [
    "BaseReport",
    "UnitMixReport",
    "listings_frame",
    "unit_mix_frame",
]
