# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from unitmix.core.primitives import (
    BuildingTypeEnum,
    CommitStage,
    ImageCategoryEnum,
    SyncStatus,
    enum_to_string,
)


def test_enum_member_values():
    """Test that some key enum members have the correct string value."""
    assert BuildingTypeEnum.APARTMENT == "apartment"
    assert BuildingTypeEnum.OFFICE == "office"
    assert ImageCategoryEnum.FLOOR_PLAN == "floor_plan"
    assert SyncStatus.CLEAN == "clean"


def test_commit_stages_in_pipeline_order():
    stages = list(CommitStage)
    assert stages.index(CommitStage.BLOCK) < stages.index(CommitStage.LISTING)
    assert stages.index(CommitStage.LISTING) < stages.index(CommitStage.UNIT)
    assert stages.index(CommitStage.UNIT) < stages.index(CommitStage.IMAGE)


def test_enum_to_string():
    assert enum_to_string(BuildingTypeEnum.HOSTEL) == "hostel"
    assert enum_to_string("already_string") == "already_string"
    assert enum_to_string(3) == "3"
