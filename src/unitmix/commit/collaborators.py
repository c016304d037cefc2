# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Collaborator interfaces and the records exchanged with them.

Storage, file upload and identity are owned by the host application. The
engine only talks to them through the abstract gateways below, awaiting
one call at a time.
"""

from __future__ import annotations

import datetime
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True, slots=True)
class Actor:
    """The current user as reported by the identity collaborator."""

    actor_id: Optional[str]
    is_permitted: bool


@dataclass(frozen=True, slots=True)
class BlockRecord:
    """
    Persisted building ("block").

    Attributes:
        name: Building name
        location: Address or area
        building_type: Building category value (e.g. "apartment")
        total_floors: Number of floors
        building_id: Identifier assigned by storage; None for a new building
    """

    name: str
    location: str
    building_type: str
    total_floors: int
    building_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class SubRoomRecord:
    kind: str
    name: str
    description: str = ""
    image_urls: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ListingRecord:
    """
    Persisted listing for one unit type.

    Prices are integers in minor currency units.
    """

    building_id: str
    unit_type: str
    title: str
    description: str
    price_minor_units: int
    bedrooms: int
    bathrooms: int
    area: float
    total_units: int
    units_per_floor: Tuple[Tuple[int, int], ...]
    desk_capacity: Optional[int] = None
    features: Tuple[str, ...] = ()
    amenities: Tuple[str, ...] = ()
    utilities: Tuple[str, ...] = ()
    available_from: Optional[datetime.date] = None
    min_lease_term: int = 1
    pet_policy: str = ""
    video_url: str = ""
    sub_rooms: Tuple[SubRoomRecord, ...] = ()
    listing_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class UnitRecord:
    """Persisted physical unit, keyed by (listing_id, floor_number, unit_code)."""

    listing_id: str
    building_id: str
    floor_number: int
    unit_code: str
    unit_type: str
    price_minor_units: int
    is_available: bool = True
    sync_with_template: bool = True
    unit_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ImageRecord:
    """Persisted listing image, keyed by (listing_id, category, is_primary, display_order)."""

    listing_id: str
    url: str
    category: str = "general"
    is_primary: bool = False
    display_order: int = 0
    image_id: Optional[str] = None


class PersistenceGateway(ABC):
    """Storage for blocks, listings, units and images."""

    @abstractmethod
    async def save_block(self, block: BlockRecord) -> str:
        """Create (no `building_id`) or update a block; returns its identifier."""
        pass

    @abstractmethod
    async def create_listing(self, listing: ListingRecord) -> str:
        """Create a listing; returns its identifier."""
        pass

    @abstractmethod
    async def create_unit(self, unit: UnitRecord) -> None:
        pass

    @abstractmethod
    async def create_image(self, image: ImageRecord) -> None:
        pass

    @abstractmethod
    async def delete_listing(self, listing_id: str) -> None:
        """Delete one listing with its units and images; idempotent."""
        pass

    @abstractmethod
    async def delete_building(self, building_id: str) -> None:
        """Delete a building, cascading to listings, units and images; idempotent."""
        pass

    @abstractmethod
    async def load_block(self, building_id: str) -> Optional[BlockRecord]:
        pass

    @abstractmethod
    async def load_listings(self, building_id: str) -> List[ListingRecord]:
        pass

    @abstractmethod
    async def load_units(self, building_id: str) -> List[UnitRecord]:
        pass

    @abstractmethod
    async def load_images(self, listing_id: str) -> List[ImageRecord]:
        pass


class UploadGateway(ABC):
    """File storage returning stable URLs."""

    @abstractmethod
    async def upload(self, data: bytes, path: str) -> str:
        """Store `data` at `path` and return its public URL."""
        pass


class IdentityProvider(ABC):
    @abstractmethod
    async def current_actor(self) -> Actor:
        pass


@dataclass(frozen=True, slots=True)
class PersistedBuilding:
    """Everything storage holds for one building, as loaded for reconstruction."""

    block: BlockRecord
    listings: Tuple[ListingRecord, ...] = ()
    units: Tuple[UnitRecord, ...] = ()
    images: Tuple[ImageRecord, ...] = field(default_factory=tuple)
