# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit-number generation: fixed-width, decodable unit codes with check
digits, placeholder codes for unsaved buildings, and renumbering.
"""

from .unit_number import (
    CODE_LENGTH,
    UnitNumber,
    UnitNumberGenerator,
    building_code_for,
    check_digits,
    decode,
    encode,
    format_for_display,
    is_placeholder,
    placeholder,
    sequential,
    validate,
)

__all__ = [
    "CODE_LENGTH",
    "UnitNumber",
    "UnitNumberGenerator",
    "building_code_for",
    "check_digits",
    "decode",
    "encode",
    "format_for_display",
    "is_placeholder",
    "placeholder",
    "sequential",
    "validate",
]
