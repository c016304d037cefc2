# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Media uploads.

The engine never stores file bytes: images are sent to the upload
gateway and only the returned URL is kept on the unit-type template.
"""

from __future__ import annotations

import logging
import re

from ..building.state import BuildingState
from ..core.primitives import CollaboratorError, CommitStage, ValidationError
from .collaborators import UploadGateway

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def media_path(state: BuildingState, unit_type: str, filename: str) -> str:
    """Target path for an image: `buildings/{id or draft}/{unit type}/{filename}`."""
    building = state.building_id or "draft"
    return "/".join(
        _UNSAFE.sub("-", part) for part in ("buildings", building, unit_type, filename)
    )


async def upload_media(
    uploads: UploadGateway,
    data: bytes,
    state: BuildingState,
    unit_type: str,
    filename: str,
) -> str:
    """
    Upload image bytes and return the stored URL.

    Raises:
        ValidationError: If `data` is empty or `filename` is blank
        CollaboratorError: If the upload gateway fails or returns no URL
    """
    if not isinstance(data, (bytes, bytearray)) or not data:
        raise ValidationError("must be non-empty bytes", field="data", value=type(data).__name__)
    if not isinstance(filename, str) or not filename.strip():
        raise ValidationError("must be a non-empty string", field="filename", value=filename)

    path = media_path(state, unit_type, filename)
    try:
        url = await uploads.upload(bytes(data), path)
    except Exception as exc:
        logger.warning(f"Upload to {path} failed: {exc}")
        raise CollaboratorError(CommitStage.UPLOAD, exc, details={"path": path}) from exc

    if not isinstance(url, str) or not url:
        raise CollaboratorError(
            CommitStage.UPLOAD,
            ValueError(f"upload gateway returned no URL for {path}"),
            details={"path": path},
        )
    logger.debug(f"Uploaded {len(data)} bytes to {path}")
    return url
