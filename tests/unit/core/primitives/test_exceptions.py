# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from unitmix.core.primitives import (
    CollaboratorError,
    CommitStage,
    DerivationError,
    NotFoundError,
    PermissionDeniedError,
    UnitMixError,
    ValidationError,
)


def test_validation_error_names_field():
    error = ValidationError("must be a number", field="price", value="abc")
    assert str(error) == "Validation error for field 'price': must be a number"
    assert error.field == "price"
    assert error.value == "abc"
    assert error.reason == "must be a number"
    assert isinstance(error, ValueError)
    assert isinstance(error, UnitMixError)


def test_validation_error_without_field():
    assert str(ValidationError("bad grid")) == "bad grid"


def test_not_found_error():
    error = NotFoundError("Floor", 7)
    assert str(error) == "Floor with identifier '7' not found"
    assert isinstance(error, LookupError)


def test_permission_denied_error():
    error = PermissionDeniedError("user-9")
    assert error.actor_id == "user-9"
    assert "user-9" in str(error)


def test_collaborator_error_carries_stage_and_cause():
    cause = RuntimeError("connection reset")
    error = CollaboratorError(CommitStage.UNIT, cause, rolled_back=True, details={"created": 3})
    assert error.stage == CommitStage.UNIT
    assert error.cause is cause
    assert error.rolled_back is True
    assert error.details == {"created": 3}
    assert str(error) == "Collaborator failed during 'unit' stage: connection reset"


def test_details_default_to_empty_dict():
    assert DerivationError("no floors").details == {}
