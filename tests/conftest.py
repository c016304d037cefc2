# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Test utilities and fixtures for unitmix testing.

Provides deterministic edit sessions and in-memory collaborators so the
commit pipeline can be exercised without real storage. The collaborator
classes live in `tests/fakes.py`.
"""

from __future__ import annotations

import pytest

from unitmix.building import UnitTypeCount

from tests.fakes import InMemoryPersistence, InMemoryUploads, StaticIdentity, create_test_editor


# Pytest Fixtures
@pytest.fixture
def editor():
    """Three floors, each with one 1BR unit at price 0."""
    return create_test_editor()


@pytest.fixture
def scenario_a_editor():
    """Three floors, each `{1BR, count 2, price 0}`."""
    return create_test_editor(entry=UnitTypeCount(type="1BR", count=2, price=0.0))


@pytest.fixture
def persistence():
    return InMemoryPersistence()


@pytest.fixture
def identity():
    return StaticIdentity()


@pytest.fixture
def uploads():
    return InMemoryUploads()
