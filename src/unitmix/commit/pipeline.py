# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Commit pipeline.

Persists a building snapshot through the persistence gateway in
dependency order:

1. identity check (the actor must be permitted)
2. listing derivation (fails before anything is written)
3. block
4. listings, one per unit type
5. units, with real unit codes
6. images

Calls are awaited one at a time. When a write fails after records were
created, the pipeline removes what this commit created (the whole
building if the commit created it, otherwise the new listings) before
raising `CollaboratorError`. Previous listings of a re-committed building
are deleted last; a failure there leaves the remaining previous listings
next to the new ones and is reported with `rolled_back=False`. A failed
rollback is reported with the `rollback` stage.

The caller's snapshot is never modified; the committed snapshot is
returned in `CommitResult.state`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..building.commands import AssignBuilding, ReconcileUnits
from ..building.state import BuildingState
from ..building.sync import SynchronizationController
from ..core.primitives import (
    CollaboratorError,
    CommitStage,
    PermissionDeniedError,
    UnitMixError,
    ValidationError,
    enum_to_string,
)
from ..derivation import DerivedListing, derive_listings
from ..numbering import is_placeholder
from .collaborators import (
    BlockRecord,
    IdentityProvider,
    ImageRecord,
    ListingRecord,
    PersistenceGateway,
    SubRoomRecord,
    UnitRecord,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommitResult:
    """
    Outcome of a successful commit.

    Attributes:
        building_id: Persisted building identifier
        listing_ids: Listing identifier per unit type, in listing order
        unit_count: Number of unit records written
        image_count: Number of image records written
        state: Committed snapshot (building id assigned, real unit codes)
        listings: Derived listings that were written
        actor_id: Actor that performed the commit
    """

    building_id: str
    listing_ids: Dict[str, str]
    unit_count: int
    image_count: int
    state: BuildingState
    listings: List[DerivedListing] = field(default_factory=list)
    actor_id: Optional[str] = None


def to_minor_units(price: float, multiplier: int) -> int:
    return int(round(price * multiplier))


def listing_record(
    listing: DerivedListing, building_id: str, multiplier: int
) -> ListingRecord:
    return ListingRecord(
        building_id=building_id,
        unit_type=listing.unit_type,
        title=listing.title,
        description=listing.description,
        price_minor_units=to_minor_units(listing.price, multiplier),
        bedrooms=listing.bedroom_count,
        bathrooms=listing.bathroom_count,
        area=listing.area,
        total_units=listing.total_unit_count,
        units_per_floor=tuple((entry.floor, entry.count) for entry in listing.units_per_floor),
        desk_capacity=listing.desk_capacity,
        features=listing.features,
        amenities=listing.amenities,
        utilities=listing.utilities,
        available_from=listing.available_from,
        min_lease_term=listing.min_lease_term,
        pet_policy=listing.pet_policy,
        video_url=listing.video_url,
        sub_rooms=tuple(
            SubRoomRecord(
                kind=room.kind,
                name=room.name,
                description=room.description,
                image_urls=room.image_urls,
            )
            for room in listing.sub_rooms
        ),
    )


async def _check_identity(identity: IdentityProvider) -> Optional[str]:
    try:
        actor = await identity.current_actor()
    except Exception as exc:
        logger.error(f"Identity check failed: {exc}")
        raise CollaboratorError(CommitStage.IDENTITY, exc) from exc
    if not actor.is_permitted:
        logger.warning(f"Commit refused for actor {actor.actor_id}")
        raise PermissionDeniedError(actor.actor_id)
    return actor.actor_id


async def _rollback(
    persistence: PersistenceGateway,
    building_id: Optional[str],
    created_building: bool,
    listing_ids: List[str],
) -> None:
    if building_id is None:
        return
    if created_building:
        logger.warning(f"Rolling back: deleting building {building_id}")
        await persistence.delete_building(building_id)
        return
    for listing_id in listing_ids:
        logger.warning(f"Rolling back: deleting listing {listing_id}")
        await persistence.delete_listing(listing_id)


def _check_unit_capacity(state: BuildingState, controller: SynchronizationController) -> None:
    """Reject floors whose units cannot all receive a unit code, before any write."""
    limit = controller.settings.numbering.max_units_per_floor
    for floor in state.floors.floors:
        if floor.total_units > limit:
            raise ValidationError(
                f"floor {floor.floor_number} has more units than unit codes allow ({limit})",
                field="count",
                value=floor.total_units,
            )


def _prepare_state(
    state: BuildingState, building_id: str, controller: SynchronizationController
) -> BuildingState:
    """Assign the building id and bring the unit registry in line with the floors."""
    if state.building_id != building_id:
        state = controller.apply(state, AssignBuilding(building_id))
    state = controller.apply(state, ReconcileUnits())
    placeholders = [
        unit.unit_code
        for unit in state.units
        if is_placeholder(unit.unit_code, controller.settings.numbering)
    ]
    if placeholders:
        raise UnitMixError(
            f"Placeholder unit codes left after numbering: {placeholders}",
            details={"building_id": building_id},
        )
    return state


async def commit_building(
    state: BuildingState,
    persistence: PersistenceGateway,
    identity: IdentityProvider,
    controller: Optional[SynchronizationController] = None,
) -> CommitResult:
    """
    Persist `state` and return the committed snapshot.

    Args:
        state: Snapshot to persist (not modified)
        persistence: Storage gateway
        identity: Identity collaborator; the actor must be permitted
        controller: Controller supplying catalog, settings and ids

    Raises:
        PermissionDeniedError: If the actor may not commit
        DerivationError: If the building has no unit types to list
        CollaboratorError: If a collaborator call fails; `stage` names the
            step and `rolled_back` tells whether written records were removed;
            the `rollback` stage means undoing the failed writes failed too
    """
    controller = controller or SynchronizationController()
    settings = controller.settings
    multiplier = settings.commit.currency_minor_units

    actor_id = await _check_identity(identity)

    listings = derive_listings(state, controller.catalog, settings.default_min_lease_term)
    _check_unit_capacity(state, controller)

    created_building = state.building_id is None
    building_id: Optional[str] = state.building_id
    listing_ids: Dict[str, str] = {}
    previous_listing_ids: List[str] = []
    deleted_previous: List[str] = []
    replacing = False
    unit_count = 0
    image_count = 0

    try:
        stage = CommitStage.BLOCK
        logger.info(f"Committing building '{state.name}' ({len(listings)} listings)")
        if not created_building:
            previous_listing_ids = [
                record.listing_id
                for record in await persistence.load_listings(building_id)
                if record.listing_id is not None
            ]
        saved_id = await persistence.save_block(
            BlockRecord(
                name=state.name,
                location=state.location,
                building_type=enum_to_string(state.building_type),
                total_floors=state.floors.total_floors,
                building_id=state.building_id,
            )
        )
        if not isinstance(saved_id, str) or not saved_id.strip():
            raise ValueError(f"storage returned an invalid building id: {saved_id!r}")
        building_id = saved_id
        committed = _prepare_state(state, building_id, controller)

        stage = CommitStage.LISTING
        for listing in listings:
            listing_ids[listing.unit_type] = await persistence.create_listing(
                listing_record(listing, building_id, multiplier)
            )
        logger.info(f"Created {len(listing_ids)} listings for building {building_id}")

        stage = CommitStage.UNIT
        prices = {listing.unit_type: listing.price for listing in listings}
        for unit in committed.units:
            price = prices[unit.type]
            if not unit.sync_with_template and unit.price is not None:
                price = unit.price
            await persistence.create_unit(
                UnitRecord(
                    listing_id=listing_ids[unit.type],
                    building_id=building_id,
                    floor_number=unit.floor_number,
                    unit_code=unit.unit_code,
                    unit_type=unit.type,
                    price_minor_units=to_minor_units(price, multiplier),
                    is_available=unit.is_available,
                    sync_with_template=unit.sync_with_template,
                    unit_id=unit.id,
                )
            )
            unit_count += 1
        logger.info(f"Created {unit_count} units for building {building_id}")

        stage = CommitStage.IMAGE
        for listing in listings:
            for image in listing.media:
                await persistence.create_image(
                    ImageRecord(
                        listing_id=listing_ids[listing.unit_type],
                        url=image.url,
                        category=enum_to_string(image.category),
                        is_primary=image.is_primary,
                        display_order=image.display_order,
                        image_id=image.id,
                    )
                )
                image_count += 1

        # New listings are complete from here on and stay if a delete fails.
        stage = CommitStage.LISTING
        replacing = True
        for listing_id in previous_listing_ids:
            await persistence.delete_listing(listing_id)
            deleted_previous.append(listing_id)
        if previous_listing_ids:
            logger.info(f"Replaced {len(previous_listing_ids)} previous listings")

    except Exception as exc:
        logger.error(f"Commit failed during '{stage.value}' stage: {exc}")
        details = {"building_id": building_id, "listing_ids": dict(listing_ids)}
        if replacing:
            remaining = [lid for lid in previous_listing_ids if lid not in deleted_previous]
            details["previous_listing_ids"] = remaining
            logger.warning(
                f"Building {building_id} keeps {len(remaining)} previous listings "
                "next to the new ones"
            )
            raise CollaboratorError(stage, exc, rolled_back=False, details=details) from exc
        can_undo = building_id is not None and (listing_ids or created_building)
        if not (settings.commit.rollback_on_failure and can_undo):
            raise CollaboratorError(stage, exc, rolled_back=False, details=details) from exc
        try:
            await _rollback(persistence, building_id, created_building, list(listing_ids.values()))
        except Exception as rollback_exc:
            logger.error(f"Rollback failed: {rollback_exc}")
            details["failed_stage"] = stage.value
            details["rollback_error"] = str(rollback_exc)
            raise CollaboratorError(
                CommitStage.ROLLBACK, exc, rolled_back=False, details=details
            ) from rollback_exc
        raise CollaboratorError(stage, exc, rolled_back=True, details=details) from exc

    logger.info(
        f"Committed building {building_id}: {len(listing_ids)} listings, "
        f"{unit_count} units, {image_count} images"
    )
    return CommitResult(
        building_id=building_id,
        listing_ids=listing_ids,
        unit_count=unit_count,
        image_count=image_count,
        state=committed,
        listings=listings,
        actor_id=actor_id,
    )
