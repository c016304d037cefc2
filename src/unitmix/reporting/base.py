# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Base reporting classes.

Reports translate a building snapshot into presentation-ready tables.
They only format and aggregate what the snapshot already holds; they
never change it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..building.state import BuildingState


class BaseReport(ABC):
    """
    Abstract base class for all building reports.

    Reports operate on a `BuildingState` and transform it into a
    presentation format (usually a pandas DataFrame).
    """

    def __init__(self, state: BuildingState):
        if not isinstance(state, BuildingState):
            raise TypeError("BaseReport requires a BuildingState object")
        self._state = state

    @property
    def state(self) -> BuildingState:
        return self._state

    @abstractmethod
    def generate(self, **kwargs) -> Any:
        """Generate the formatted report output."""
        pass
