# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Exception classes raised by the unitmix engine.

Rule violations are rejected before any state changes, so catching one of
these never leaves an edit session half-updated.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from .enums import CommitStage


class UnitMixError(Exception):
    """Base exception for all unitmix errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(UnitMixError, ValueError):
    """Raised when a proposed mutation would break a building invariant."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        if field:
            full_message = f"Validation error for field '{field}': {message}"
        else:
            full_message = message
        super().__init__(full_message, details)
        self.field = field
        self.value = value
        self.reason = message


class NotFoundError(UnitMixError, LookupError):
    """Raised when a floor, entry, unit type, image or unit does not exist."""

    def __init__(
        self,
        resource_type: str,
        identifier: Any,
        details: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource_type} with identifier '{identifier}' not found"
        super().__init__(message, details)
        self.resource_type = resource_type
        self.identifier = identifier


class DerivationError(UnitMixError):
    """Raised when a floor configuration yields no listings at all."""

    pass


class PermissionDeniedError(UnitMixError):
    """Raised when the identity collaborator does not permit a commit."""

    def __init__(self, actor_id: Optional[str], details: Optional[Dict[str, Any]] = None):
        message = f"Permission denied: actor '{actor_id}' cannot commit buildings"
        super().__init__(message, details)
        self.actor_id = actor_id


class CollaboratorError(UnitMixError):
    """Raised when the persistence, upload or identity collaborator fails."""

    def __init__(
        self,
        stage: CommitStage,
        cause: Optional[BaseException] = None,
        rolled_back: bool = False,
        details: Optional[Dict[str, Any]] = None,
    ):
        message = f"Collaborator failed during '{stage.value}' stage"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message, details)
        self.stage = stage
        self.cause = cause
        self.rolled_back = rolled_back
