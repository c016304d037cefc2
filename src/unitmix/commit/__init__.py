# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Commit and reload of buildings through external collaborators.
"""

from .collaborators import (
    Actor,
    BlockRecord,
    IdentityProvider,
    ImageRecord,
    ListingRecord,
    PersistedBuilding,
    PersistenceGateway,
    SubRoomRecord,
    UnitRecord,
    UploadGateway,
)
from .pipeline import CommitResult, commit_building, listing_record, to_minor_units
from .reconstruct import load_building, open_editor, reconstruct_state
from .uploads import media_path, upload_media

__all__ = [
    # Collaborators
    "Actor",
    "BlockRecord",
    "IdentityProvider",
    "ImageRecord",
    "ListingRecord",
    "PersistedBuilding",
    "PersistenceGateway",
    "SubRoomRecord",
    "UnitRecord",
    "UploadGateway",

    # Pipeline
    "CommitResult",
    "commit_building",
    "listing_record",
    "to_minor_units",

    # Reconstruction
    "load_building",
    "open_editor",
    "reconstruct_state",

    # Uploads
    "media_path",
    "upload_media",
]
