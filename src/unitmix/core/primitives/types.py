# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from typing import Annotated

from pydantic import Field

# constrained types
PositiveInt = Annotated[int, Field(strict=True, ge=0)]
PositiveIntGe1 = Annotated[int, Field(strict=True, ge=1)]
FloorNumber = Annotated[int, Field(strict=True, ge=1)]
Money = Annotated[float, Field(ge=0)]
PositiveFloat = Annotated[float, Field(ge=0)]
UnitTypeCode = Annotated[str, Field(min_length=1)]
