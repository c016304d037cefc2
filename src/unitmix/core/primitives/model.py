# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Base Pydantic model for every unitmix record.

    Records are immutable. A change to a floor, template or unit is expressed
    by building a new record with `evolve()`; the edit session that owns the
    current snapshot lives outside of the models (see `BuildingEditor`).
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
    )

    def evolve(self, **changes: Any) -> "Model":
        """Return a validated copy with `changes` applied.

        Unlike `model_copy(update=...)`, the result is re-validated so field
        constraints (non-negative prices, counts >= 1) still hold.
        """
        data: Dict[str, Any] = self.model_dump(
            exclude=set(type(self).model_computed_fields)
        )
        data.update(changes)
        return type(self).model_validate(data)
