# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Reconstruction of an edit session from persisted records.

Reopening a committed building rebuilds the floor grid from its unit
records (counted per floor and unit type), the templates from its
listings and images, and the unit registry from the unit records.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from ..building.editor import BuildingEditor
from ..building.floors import FloorConfig, FloorGrid, UnitTypeCount
from ..building.state import BuildingState
from ..building.sync import SynchronizationController
from ..building.templates import (
    CategorizedImage,
    SubRoomDetail,
    TemplateStore,
    UnitTypeTemplate,
)
from ..building.units import UnitAssignment, UnitRegistry
from ..catalog import UnitTypeCatalog
from ..core.primitives import (
    BuildingTypeEnum,
    CollaboratorError,
    CommitStage,
    EngineSettings,
    IdGenerator,
    NotFoundError,
)
from ..numbering import building_code_for
from .collaborators import (
    ImageRecord,
    ListingRecord,
    PersistedBuilding,
    PersistenceGateway,
    UnitRecord,
)

logger = logging.getLogger(__name__)


def _media(images: Sequence[ImageRecord]) -> tuple:
    """Gallery from image records, repairing the primary-image rule."""
    ordered = sorted(images, key=lambda image: image.display_order)
    primary_index = next(
        (index for index, image in enumerate(ordered) if image.is_primary), 0
    )
    return tuple(
        CategorizedImage(
            id=image.image_id or f"{image.listing_id}-{position}",
            url=image.url,
            category=image.category,
            is_primary=position == primary_index,
            display_order=position,
        )
        for position, image in enumerate(ordered)
    )


def _template(
    listing: ListingRecord, images: Sequence[ImageRecord], multiplier: int
) -> UnitTypeTemplate:
    return UnitTypeTemplate(
        type=listing.unit_type,
        title=listing.title,
        description=listing.description,
        price=listing.price_minor_units / multiplier,
        bedrooms=listing.bedrooms,
        bathrooms=listing.bathrooms,
        area=listing.area,
        desk_capacity=listing.desk_capacity,
        media=_media(images),
        video_url=listing.video_url,
        features=listing.features,
        amenities=listing.amenities,
        utilities=listing.utilities,
        available_from=listing.available_from,
        min_lease_term=listing.min_lease_term,
        pet_policy=listing.pet_policy,
        sub_rooms=tuple(
            SubRoomDetail(
                id=f"{listing.listing_id or listing.unit_type}-room-{index + 1}",
                kind=room.kind,
                name=room.name,
                description=room.description,
                image_urls=room.image_urls,
            )
            for index, room in enumerate(listing.sub_rooms)
        ),
    )


def _floor_counts(
    total_floors: int, listings: Sequence[ListingRecord], units: Sequence[UnitRecord]
) -> Dict[int, Dict[str, int]]:
    counts: Dict[int, Dict[str, int]] = {n: {} for n in range(1, total_floors + 1)}
    if units:
        for unit in sorted(units, key=lambda u: (u.floor_number, u.unit_code)):
            if unit.floor_number in counts:
                floor = counts[unit.floor_number]
                floor[unit.unit_type] = floor.get(unit.unit_type, 0) + 1
        return counts
    # No unit records: fall back to each listing's per-floor breakdown
    for listing in listings:
        for floor_number, count in listing.units_per_floor:
            if floor_number in counts and count > 0:
                floor = counts[floor_number]
                floor[listing.unit_type] = floor.get(listing.unit_type, 0) + count
    return counts


def reconstruct_state(
    persisted: PersistedBuilding,
    catalog: Optional[UnitTypeCatalog] = None,
    settings: Optional[EngineSettings] = None,
) -> BuildingState:
    """
    Rebuild a `BuildingState` from persisted records.

    Floor prices come from the listing price of each unit type. Floors
    without any unit record receive the default entry.
    """
    settings = settings or EngineSettings()
    block = persisted.block
    if block.building_id is None:
        raise NotFoundError("Building", None)
    multiplier = settings.commit.currency_minor_units
    building_type = BuildingTypeEnum(block.building_type)
    controller = SynchronizationController(
        catalog, settings.model_copy(update={"building_type": building_type})
    )

    prices = {
        listing.unit_type: listing.price_minor_units / multiplier
        for listing in persisted.listings
    }
    images_by_listing: Dict[str, List[ImageRecord]] = {}
    for image in persisted.images:
        images_by_listing.setdefault(image.listing_id, []).append(image)

    templates = TemplateStore(
        templates=tuple(
            _template(listing, images_by_listing.get(listing.listing_id, []), multiplier)
            for listing in persisted.listings
        )
    )

    default_type = controller.default_unit_type
    default_entry = UnitTypeCount(type=default_type, count=1, price=prices.get(default_type, 0.0))
    floors = []
    for floor_number, counts in _floor_counts(
        block.total_floors, persisted.listings, persisted.units
    ).items():
        entries = tuple(
            UnitTypeCount(type=unit_type, count=count, price=prices.get(unit_type, 0.0))
            for unit_type, count in counts.items()
        )
        if not entries:
            logger.warning(
                f"Floor {floor_number} of building {block.building_id} has no units; "
                f"using default unit type '{default_type}'"
            )
            entries = (default_entry,)
        floors.append(FloorConfig(floor_number=floor_number, unit_types=entries))

    units = UnitRegistry(
        units=tuple(
            UnitAssignment(
                id=unit.unit_id or unit.unit_code,
                unit_code=unit.unit_code,
                floor_number=unit.floor_number,
                type=unit.unit_type,
                is_available=unit.is_available,
                sync_with_template=unit.sync_with_template,
                price=None if unit.sync_with_template else unit.price_minor_units / multiplier,
            )
            for unit in sorted(persisted.units, key=lambda u: (u.floor_number, u.unit_code))
            if unit.floor_number <= block.total_floors
        )
    )

    state = BuildingState(
        building_id=block.building_id,
        building_code=building_code_for(block.building_id),
        name=block.name,
        location=block.location,
        building_type=building_type,
        floors=FloorGrid(floors=tuple(floors)),
        templates=templates,
        units=units,
    )
    logger.info(
        f"Reconstructed building {block.building_id}: {state.floors.total_floors} floors, "
        f"{len(templates)} templates, {len(units)} units"
    )
    return state


async def load_building(
    persistence: PersistenceGateway,
    building_id: str,
    catalog: Optional[UnitTypeCatalog] = None,
    settings: Optional[EngineSettings] = None,
) -> BuildingState:
    """
    Load a committed building and rebuild its edit state.

    Raises:
        NotFoundError: If storage has no block with `building_id`
        CollaboratorError: If a load call fails (stage LOAD)
    """
    try:
        block = await persistence.load_block(building_id)
        if block is None:
            raise NotFoundError("Building", building_id)
        listings = await persistence.load_listings(building_id)
        units = await persistence.load_units(building_id)
        images: List[ImageRecord] = []
        for listing in listings:
            if listing.listing_id is not None:
                images.extend(await persistence.load_images(listing.listing_id))
    except NotFoundError:
        raise
    except Exception as exc:
        logger.error(f"Loading building {building_id} failed: {exc}")
        raise CollaboratorError(
            CommitStage.LOAD, exc, details={"building_id": building_id}
        ) from exc

    return reconstruct_state(
        PersistedBuilding(
            block=block, listings=tuple(listings), units=tuple(units), images=tuple(images)
        ),
        catalog,
        settings,
    )


async def open_editor(
    persistence: PersistenceGateway,
    building_id: str,
    catalog: Optional[UnitTypeCatalog] = None,
    settings: Optional[EngineSettings] = None,
    ids: Optional[IdGenerator] = None,
) -> BuildingEditor:
    """Start an edit session on a committed building."""
    state = await load_building(persistence, building_id, catalog, settings)
    settings = (settings or EngineSettings()).model_copy(
        update={"building_type": state.building_type}
    )
    return BuildingEditor(state=state, catalog=catalog, settings=settings, ids=ids)
