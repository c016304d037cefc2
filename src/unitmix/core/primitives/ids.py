# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Identifier generators for in-memory records.

Every id the engine hands out (units, images, sub-rooms) comes from an
injected generator so tests can supply a deterministic sequence.
"""

from __future__ import annotations

import itertools
import uuid
from abc import ABC, abstractmethod


class IdGenerator(ABC):
    """Source of unique string identifiers."""

    @abstractmethod
    def next(self) -> str:
        """Return a new identifier, never returned before by this generator."""
        pass


class UUIDIdGenerator(IdGenerator):
    """Random UUID4 identifiers (default for live sessions)."""

    def next(self) -> str:
        return str(uuid.uuid4())


class SequentialIdGenerator(IdGenerator):
    """Deterministic `{prefix}_{n}` identifiers, starting at 1."""

    def __init__(self, prefix: str = "unit", start: int = 1):
        self.prefix = prefix
        self._counter = itertools.count(start)

    def next(self) -> str:
        return f"{self.prefix}_{next(self._counter)}"
