# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Building edit session.

`BuildingEditor` is the only mutable object in the engine. It holds the
current `BuildingState`, forwards each edit as a command to the
`SynchronizationController`, and records the commands it applied. A
rejected command raises before the current state is replaced, so a
failed edit never leaves the session half-updated.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, List, Optional, Sequence, Tuple

from ..catalog import UnitTypeCatalog
from ..core.primitives import EngineSettings, IdGenerator, ImageCategoryEnum, validate_choice
from .commands import (
    AddImage,
    AddOrIncrement,
    AddUnit,
    ApplyToAllFloors,
    BulkAddUnits,
    ChangeType,
    Command,
    CopyFloor,
    GenerateUnits,
    ReconcileUnits,
    RemoveEntry,
    RemoveImage,
    RemoveUnit,
    ReorderImages,
    SetBuildingInfo,
    SetCount,
    SetFloorPrice,
    SetPrimaryImage,
    SetTemplatePrice,
    SetTotalFloors,
    UpdateTemplate,
    UpdateUnit,
)
from .state import BuildingState
from .summary import BuildingSummary, calculate_building_summary
from .sync import SynchronizationController
from .templates import UnitTypeTemplate
from .units import UnitAssignment, UnitStats

if TYPE_CHECKING:
    from ..commit import CommitResult, IdentityProvider, PersistenceGateway, UploadGateway
    from ..derivation import DerivedListing

logger = logging.getLogger(__name__)


class BuildingEditor:
    """
    Mutable edit session for one building.

    Example:
        ```python
        editor = BuildingEditor.new("Riverside", "12 Quay St", total_floors=3)
        editor.set_count(1, "1BR", 2)
        editor.apply_to_all_floors(1)
        editor.set_price(1, 0, 1_000_000)
        listings = editor.derive_listings()
        ```
    """

    def __init__(
        self,
        state: Optional[BuildingState] = None,
        catalog: Optional[UnitTypeCatalog] = None,
        settings: Optional[EngineSettings] = None,
        ids: Optional[IdGenerator] = None,
        controller: Optional[SynchronizationController] = None,
    ):
        self.controller = controller or SynchronizationController(catalog, settings, ids)
        self._state = state if state is not None else self.controller.new_building()
        self._history: List[Command] = []

    @classmethod
    def new(
        cls,
        name: str = "",
        location: str = "",
        total_floors: int = 1,
        catalog: Optional[UnitTypeCatalog] = None,
        settings: Optional[EngineSettings] = None,
        ids: Optional[IdGenerator] = None,
    ) -> "BuildingEditor":
        """Start a session for a building that has not been persisted yet."""
        controller = SynchronizationController(catalog, settings, ids)
        return cls(
            state=controller.new_building(name, location, total_floors),
            controller=controller,
        )

    # --- Session ------------------------------------------------------------

    @property
    def state(self) -> BuildingState:
        return self._state

    @property
    def history(self) -> Tuple[Command, ...]:
        """Commands applied in this session, oldest first."""
        return tuple(self._history)

    @property
    def settings(self) -> EngineSettings:
        return self.controller.settings

    @property
    def catalog(self) -> UnitTypeCatalog:
        return self.controller.catalog

    def execute(self, command: Command) -> BuildingState:
        self._state = self.controller.apply(self._state, command)
        self._history.append(command)
        return self._state

    def replace_state(self, state: BuildingState) -> None:
        """Adopt a snapshot produced outside the session (e.g. after a commit)."""
        self._state = state

    # --- Floor grid ---------------------------------------------------------

    def set_total_floors(self, total_floors: int) -> BuildingState:
        return self.execute(SetTotalFloors(total_floors))

    def add_or_increment(self, floor: int, unit_type: str) -> BuildingState:
        return self.execute(AddOrIncrement(floor, unit_type))

    def set_count(self, floor: int, unit_type: str, count: int) -> BuildingState:
        return self.execute(SetCount(floor, unit_type, count))

    def change_type(self, floor: int, index: int, new_type: str) -> BuildingState:
        return self.execute(ChangeType(floor, index, new_type))

    def set_price(self, floor: int, index: int, price: float) -> BuildingState:
        return self.execute(SetFloorPrice(floor, index, price))

    def remove_entry(self, floor: int, index: int) -> BuildingState:
        return self.execute(RemoveEntry(floor, index))

    def copy_floor(self, source: int, target: int) -> BuildingState:
        return self.execute(CopyFloor(source, target))

    def apply_to_all_floors(self, source: int) -> BuildingState:
        return self.execute(ApplyToAllFloors(source))

    def set_building_info(
        self, name: Optional[str] = None, location: Optional[str] = None
    ) -> BuildingState:
        return self.execute(SetBuildingInfo(name, location))

    # --- Templates ----------------------------------------------------------

    def get_or_default(self, unit_type: str) -> UnitTypeTemplate:
        return self.controller.get_or_default(self._state, unit_type)

    def set_template_price(self, unit_type: str, price: float) -> BuildingState:
        return self.execute(SetTemplatePrice(unit_type, price))

    def update_template(self, unit_type: str, **changes: Any) -> BuildingState:
        return self.execute(UpdateTemplate(unit_type, changes))

    def add_image(
        self,
        unit_type: str,
        url: str,
        category: str = "general",
        is_primary: bool = False,
    ) -> str:
        """Attach an already-uploaded image; returns the new image id."""
        image_id = self.controller.ids.next()
        self.execute(AddImage(unit_type, url, category, is_primary, image_id))
        return image_id

    def remove_image(self, unit_type: str, image_id: str) -> BuildingState:
        return self.execute(RemoveImage(unit_type, image_id))

    def set_primary_image(self, unit_type: str, image_id: str) -> BuildingState:
        return self.execute(SetPrimaryImage(unit_type, image_id))

    def reorder_images(self, unit_type: str, image_ids: Sequence[str]) -> BuildingState:
        return self.execute(ReorderImages(unit_type, tuple(image_ids)))

    async def upload_image(
        self,
        uploads: "UploadGateway",
        unit_type: str,
        data: bytes,
        filename: str,
        category: str = "general",
        is_primary: bool = False,
    ) -> str:
        """
        Upload image bytes and attach the resulting URL to a unit type.

        An upload failure raises `CollaboratorError` and leaves the session
        untouched.
        """
        from ..commit.uploads import upload_media

        validate_choice(category, ImageCategoryEnum, field="category")
        url = await upload_media(uploads, data, self._state, unit_type, filename)
        return self.add_image(unit_type, url, category, is_primary)

    # --- Unit registry ------------------------------------------------------

    def generate_units_from_floors(self) -> BuildingState:
        return self.execute(GenerateUnits())

    def add_unit(self, floor: int, unit_type: str, is_available: bool = True) -> UnitAssignment:
        self.execute(AddUnit(floor, unit_type, is_available))
        return self._state.units.units[-1]

    def bulk_add_units(self, floor: int, unit_type: str, count: int) -> BuildingState:
        return self.execute(BulkAddUnits(floor, unit_type, count))

    def remove_unit(self, unit_id: str) -> BuildingState:
        return self.execute(RemoveUnit(unit_id))

    def update_unit(self, unit_id: str, **changes: Any) -> BuildingState:
        return self.execute(UpdateUnit(unit_id, changes))

    def reconcile_units(self) -> BuildingState:
        return self.execute(ReconcileUnits())

    def unit_stats(self) -> UnitStats:
        return self._state.units.stats()

    # --- Read models --------------------------------------------------------

    def summary(self) -> BuildingSummary:
        return calculate_building_summary(self._state)

    def derive_listings(self) -> List["DerivedListing"]:
        from ..derivation import derive_listings

        return derive_listings(
            self._state, self.catalog, self.settings.default_min_lease_term
        )

    # --- Persistence --------------------------------------------------------

    async def commit(
        self,
        persistence: "PersistenceGateway",
        identity: "IdentityProvider",
    ) -> "CommitResult":
        """
        Persist the building and adopt the committed snapshot.

        On any failure the exception propagates and the session keeps its
        current state, so the commit can be retried without re-entering
        data.
        """
        from ..commit import commit_building

        result = await commit_building(
            self._state, persistence, identity, self.controller
        )
        self._state = result.state
        logger.info(
            f"Building {result.building_id} committed with "
            f"{len(result.listing_ids)} listings"
        )
        return result
