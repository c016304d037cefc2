# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Listing derivation.

Collapses a building's floor grid and templates into one listing per
distinct unit type. The transform runs once per commit; its output is
handed to the persistence gateway and never edited.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Optional, Tuple

from pydantic import Field

from ..building.state import BuildingState
from ..building.templates import (
    CategorizedImage,
    SubRoomDetail,
    listing_description,
    listing_title,
)
from ..catalog import UnitTypeCatalog, catalog_for
from ..core.primitives import DerivationError, Model, Money

logger = logging.getLogger(__name__)


class UnitsOnFloor(Model):
    floor: int
    count: int


class DerivedListing(Model):
    """
    One sellable listing aggregating every floor that carries a unit type.

    Attributes:
        unit_type: Unit-type code
        label: Catalog label for the unit type
        price: Positive template price, else the highest floor price
        total_unit_count: Sum of the type's counts over all floors
        units_per_floor: (floor, count) pairs in floor order
        has_template: Whether an edited template was merged in
    """

    unit_type: str
    label: str
    title: str
    description: str
    price: Money
    bedroom_count: int
    bathroom_count: int
    area: float
    desk_capacity: Optional[int] = None
    total_unit_count: int
    units_per_floor: Tuple[UnitsOnFloor, ...]
    media: Tuple[CategorizedImage, ...] = Field(default_factory=tuple)
    features: Tuple[str, ...] = Field(default_factory=tuple)
    amenities: Tuple[str, ...] = Field(default_factory=tuple)
    utilities: Tuple[str, ...] = Field(default_factory=tuple)
    available_from: Optional[date] = None
    min_lease_term: int = 1
    pet_policy: str = ""
    video_url: str = ""
    sub_rooms: Tuple[SubRoomDetail, ...] = Field(default_factory=tuple)
    has_template: bool = False

    @property
    def floors(self) -> List[int]:
        return [entry.floor for entry in self.units_per_floor]


class _Aggregate:
    __slots__ = ("total", "per_floor", "max_price")

    def __init__(self):
        self.total = 0
        self.per_floor: List[UnitsOnFloor] = []
        self.max_price = 0.0


def derive_listings(
    state: BuildingState,
    catalog: Optional[UnitTypeCatalog] = None,
    default_min_lease_term: int = 1,
) -> List[DerivedListing]:
    """
    Derive one listing per unit type present on at least one floor.

    Floors are scanned in order; listings come out in the order their unit
    type is first seen. Templates for unit types that no floor carries are
    ignored. Unit types without a template use catalog defaults and an
    auto-generated title and description.

    Raises:
        DerivationError: If the building has no floors or no floor has any
            unit-type entry
    """
    catalog = catalog or catalog_for(state.building_type)
    if not state.floors.floors:
        raise DerivationError("Cannot derive listings: the building has no floors")

    aggregates: Dict[str, _Aggregate] = {}
    for floor in state.floors.floors:
        for entry in floor.unit_types:
            aggregate = aggregates.setdefault(entry.type, _Aggregate())
            aggregate.total += entry.count
            aggregate.per_floor.append(
                UnitsOnFloor(floor=floor.floor_number, count=entry.count)
            )
            aggregate.max_price = max(aggregate.max_price, entry.price)

    if not aggregates:
        raise DerivationError(
            f"Cannot derive listings: none of the {state.floors.total_floors} floors "
            "has a unit type"
        )

    listings = []
    for unit_type, aggregate in aggregates.items():
        defaults = catalog.defaults_for(unit_type)
        template = state.templates.get(unit_type)
        auto_title = listing_title(state.name, defaults.label)
        auto_description = listing_description(defaults.label, state.location, aggregate.total)

        if template is None:
            listing = DerivedListing(
                unit_type=unit_type,
                label=defaults.label,
                title=auto_title,
                description=auto_description,
                price=aggregate.max_price,
                bedroom_count=defaults.bedrooms,
                bathroom_count=defaults.bathrooms,
                area=defaults.area_estimate,
                desk_capacity=defaults.desk_capacity,
                total_unit_count=aggregate.total,
                units_per_floor=tuple(aggregate.per_floor),
                min_lease_term=default_min_lease_term,
            )
        else:
            listing = DerivedListing(
                unit_type=unit_type,
                label=defaults.label,
                title=template.title.strip() or auto_title,
                description=template.description.strip() or auto_description,
                price=template.price if template.price > 0 else aggregate.max_price,
                bedroom_count=template.bedrooms,
                bathroom_count=template.bathrooms,
                area=template.area,
                desk_capacity=template.desk_capacity,
                total_unit_count=aggregate.total,
                units_per_floor=tuple(aggregate.per_floor),
                media=template.media,
                features=template.features,
                amenities=template.amenities,
                utilities=template.utilities,
                available_from=template.available_from,
                min_lease_term=template.min_lease_term,
                pet_policy=template.pet_policy,
                video_url=template.video_url,
                sub_rooms=template.sub_rooms,
                has_template=True,
            )
        listings.append(listing)

    stale = [t for t in state.templates.types() if t not in aggregates]
    if stale:
        logger.debug(f"Skipping templates for unit types on no floor: {stale}")
    logger.info(
        f"Derived {len(listings)} listings covering {state.floors.total_units} units "
        f"from {state.floors.total_floors} floors"
    )
    return listings
