# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Synchronization controller.

The floor grid and the unit-type templates can both set the price of a
unit type. The controller owns every mutation of a `BuildingState` and
folds the reciprocal update into the same step:

- Floor -> Template: a positive price on a floor entry becomes the
  template price (the template is created from catalog defaults if
  needed) and from there the price of every floor entry of that type.
- Template -> Floor: a template price rewrites the price of every floor
  entry of that type on every floor.

Propagation completes before `apply` returns, so callers never observe a
unit type in the DIRTY state.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from ..catalog import UnitTypeCatalog, catalog_for
from ..core.primitives import (
    EngineSettings,
    IdGenerator,
    ImageCategoryEnum,
    SyncStatus,
    UUIDIdGenerator,
    ValidationError,
    validate_choice,
    validate_non_negative,
    validate_unit_type,
)
from ..numbering import UnitNumberGenerator, building_code_for
from .commands import (
    AddImage,
    AddOrIncrement,
    AddUnit,
    ApplyToAllFloors,
    AssignBuilding,
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
from .floors import FloorGrid, UnitTypeCount
from .state import BuildingState
from .templates import UnitTypeTemplate, listing_title

logger = logging.getLogger(__name__)


class SynchronizationController:
    """
    Applies commands to building snapshots with synchronization folded in.

    Args:
        catalog: Unit-type catalog; defaults to the built-in catalog for
            `settings.building_type`
        settings: Engine settings
        ids: Id generator for units and images
    """

    def __init__(
        self,
        catalog: Optional[UnitTypeCatalog] = None,
        settings: Optional[EngineSettings] = None,
        ids: Optional[IdGenerator] = None,
    ):
        self.settings = settings or EngineSettings()
        self.catalog = catalog or catalog_for(self.settings.building_type)
        self.ids = ids or UUIDIdGenerator()
        self._status: Dict[str, SyncStatus] = {}
        self._handlers: Dict[type, Callable[[BuildingState, Any], BuildingState]] = {
            SetTotalFloors: self._set_total_floors,
            AddOrIncrement: self._add_or_increment,
            SetCount: self._set_count,
            ChangeType: self._change_type,
            SetFloorPrice: self._set_floor_price,
            RemoveEntry: self._remove_entry,
            CopyFloor: self._copy_floor,
            ApplyToAllFloors: self._apply_to_all_floors,
            SetTemplatePrice: self._set_template_price,
            UpdateTemplate: self._update_template,
            AddImage: self._add_image,
            RemoveImage: self._remove_image,
            SetPrimaryImage: self._set_primary_image,
            ReorderImages: self._reorder_images,
            GenerateUnits: self._generate_units,
            AddUnit: self._add_unit,
            BulkAddUnits: self._bulk_add_units,
            RemoveUnit: self._remove_unit,
            UpdateUnit: self._update_unit,
            ReconcileUnits: self._reconcile_units,
            SetBuildingInfo: self._set_building_info,
            AssignBuilding: self._assign_building,
        }

    # --- Public API ---------------------------------------------------------

    def apply(self, state: BuildingState, command: Command) -> BuildingState:
        """
        Return the state after `command`.

        Raises:
            ValidationError: If the command would break a building invariant
            NotFoundError: If the command names a floor, entry, image or unit
                that does not exist
        """
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"Unsupported command type: {type(command).__name__}")
        new_state = handler(state, command)
        logger.debug(f"Applied {command!r}")
        return new_state

    @property
    def default_unit_type(self) -> str:
        return self.settings.default_unit_type or self.catalog.default_code

    def status_of(self, unit_type: str) -> SyncStatus:
        return self._status.get(unit_type, SyncStatus.CLEAN)

    def numbering(self, state: BuildingState) -> UnitNumberGenerator:
        """Unit-code generator for `state` (placeholders until the building is persisted)."""
        return UnitNumberGenerator(state.building_code, self.settings.numbering)

    def get_or_default(self, state: BuildingState, unit_type: str) -> UnitTypeTemplate:
        """
        The template for `unit_type`, or a fully-populated default.

        Defaults come from the catalog; the price is the first non-zero
        floor price for the type (in floor order), else 0.
        """
        existing = state.templates.get(unit_type)
        if existing is not None:
            return existing
        defaults = self.catalog.defaults_for(unit_type)
        return UnitTypeTemplate(
            type=unit_type,
            title=listing_title(state.name, defaults.label),
            price=state.floors.first_nonzero_price(unit_type),
            bedrooms=defaults.bedrooms,
            bathrooms=defaults.bathrooms,
            area=defaults.area_estimate,
            desk_capacity=defaults.desk_capacity,
            min_lease_term=self.settings.default_min_lease_term,
        )

    def default_entry(self, state: BuildingState) -> UnitTypeCount:
        """Entry placed on floors that would otherwise have no unit types."""
        unit_type = self.default_unit_type
        return UnitTypeCount(
            type=unit_type, count=1, price=self.get_or_default(state, unit_type).price
        )

    def new_building(
        self, name: str = "", location: str = "", total_floors: int = 1
    ) -> BuildingState:
        """Fresh, unpersisted building with `total_floors` default floors."""
        empty = BuildingState(
            name=name, location=location, building_type=self.settings.building_type
        )
        return self.apply(empty, SetTotalFloors(total_floors))

    # --- Price propagation --------------------------------------------------

    def _propagate_price(
        self, state: BuildingState, floors: FloorGrid, unit_type: str, price: float
    ) -> BuildingState:
        self._status[unit_type] = SyncStatus.DIRTY
        template = self.get_or_default(state.with_parts(floors=floors), unit_type)
        if template.price != price:
            template = template.evolve(price=price)
        templates = state.templates.upsert(template)
        floors = floors.set_type_price(unit_type, price)
        self._status[unit_type] = SyncStatus.CLEAN
        logger.debug(f"Synchronized price of '{unit_type}' to {price}")
        return state.with_parts(floors=floors, templates=templates)

    # --- Floor grid ---------------------------------------------------------

    def _set_total_floors(self, state: BuildingState, cmd: SetTotalFloors) -> BuildingState:
        floors = state.floors.set_total_floors(
            cmd.total_floors,
            self.default_entry(state),
            self.settings.numbering.max_floors,
        )
        return state.with_parts(
            floors=floors, units=state.units.drop_floors_above(cmd.total_floors)
        )

    def _add_or_increment(self, state: BuildingState, cmd: AddOrIncrement) -> BuildingState:
        return state.with_parts(floors=state.floors.add_or_increment(cmd.floor, cmd.unit_type))

    def _set_count(self, state: BuildingState, cmd: SetCount) -> BuildingState:
        floors = state.floors.set_count(
            cmd.floor, cmd.unit_type, cmd.count, self.default_entry(state)
        )
        return state.with_parts(floors=floors)

    def _change_type(self, state: BuildingState, cmd: ChangeType) -> BuildingState:
        return state.with_parts(
            floors=state.floors.change_type(cmd.floor, cmd.index, cmd.new_type)
        )

    def _set_floor_price(self, state: BuildingState, cmd: SetFloorPrice) -> BuildingState:
        price = validate_non_negative(cmd.price, field="price")
        entry = state.floors.floor(cmd.floor).entry(cmd.index)
        floors = state.floors.set_entry_price(cmd.floor, cmd.index, price)
        if price <= 0:
            # A zero price is a per-floor edit; it never clears the template.
            return state.with_parts(floors=floors)
        return self._propagate_price(state, floors, entry.type, price)

    def _remove_entry(self, state: BuildingState, cmd: RemoveEntry) -> BuildingState:
        floors = state.floors.remove_entry(cmd.floor, cmd.index, self.default_entry(state))
        return state.with_parts(floors=floors)

    def _copy_floor(self, state: BuildingState, cmd: CopyFloor) -> BuildingState:
        return state.with_parts(floors=state.floors.copy_floor(cmd.source, cmd.target))

    def _apply_to_all_floors(self, state: BuildingState, cmd: ApplyToAllFloors) -> BuildingState:
        return state.with_parts(floors=state.floors.apply_to_all_floors(cmd.source))

    # --- Templates ----------------------------------------------------------

    def _set_template_price(self, state: BuildingState, cmd: SetTemplatePrice) -> BuildingState:
        validate_unit_type(cmd.unit_type, field="unit_type")
        price = validate_non_negative(cmd.price, field="price")
        return self._propagate_price(state, state.floors, cmd.unit_type, price)

    def _update_template(self, state: BuildingState, cmd: UpdateTemplate) -> BuildingState:
        validate_unit_type(cmd.unit_type, field="unit_type")
        changes = dict(cmd.changes)
        if "type" in changes:
            raise ValidationError(
                "cannot be changed on a template", field="type", value=changes["type"]
            )
        if "media" in changes:
            raise ValidationError(
                "is edited through the image operations", field="media", value=changes["media"]
            )
        price = changes.pop("price", None)
        if price is not None:
            price = validate_non_negative(price, field="price")

        if changes:
            template = self.get_or_default(state, cmd.unit_type)
            try:
                template = template.evolve(**changes)
            except PydanticValidationError as exc:
                error = exc.errors()[0]
                field = ".".join(str(part) for part in error["loc"]) or None
                raise ValidationError(
                    error["msg"], field=field, value=error.get("input")
                ) from exc
            state = state.with_parts(templates=state.templates.upsert(template))

        if price is not None:
            state = self._propagate_price(state, state.floors, cmd.unit_type, price)
        return state

    def _add_image(self, state: BuildingState, cmd: AddImage) -> BuildingState:
        validate_unit_type(cmd.unit_type, field="unit_type")
        if not isinstance(cmd.url, str) or not cmd.url.strip():
            raise ValidationError("must be a non-empty string", field="url", value=cmd.url)
        template = self.get_or_default(state, cmd.unit_type).with_image_added(
            image_id=cmd.image_id or self.ids.next(),
            url=cmd.url,
            category=validate_choice(cmd.category, ImageCategoryEnum, field="category"),
            is_primary=cmd.is_primary,
        )
        return state.with_parts(templates=state.templates.upsert(template))

    def _remove_image(self, state: BuildingState, cmd: RemoveImage) -> BuildingState:
        template = state.templates.require(cmd.unit_type).with_image_removed(cmd.image_id)
        return state.with_parts(templates=state.templates.upsert(template))

    def _set_primary_image(self, state: BuildingState, cmd: SetPrimaryImage) -> BuildingState:
        template = state.templates.require(cmd.unit_type).with_primary_image(cmd.image_id)
        return state.with_parts(templates=state.templates.upsert(template))

    def _reorder_images(self, state: BuildingState, cmd: ReorderImages) -> BuildingState:
        template = state.templates.require(cmd.unit_type).with_images_reordered(
            list(cmd.image_ids)
        )
        return state.with_parts(templates=state.templates.upsert(template))

    # --- Unit registry ------------------------------------------------------

    def _generate_units(self, state: BuildingState, cmd: GenerateUnits) -> BuildingState:
        if not state.units.is_empty:
            logger.debug("Unit registry already generated; keeping existing units")
            return state
        units = state.units.expand_from_floors(state.floors, self.numbering(state), self.ids)
        return state.with_parts(units=units)

    def _add_unit(self, state: BuildingState, cmd: AddUnit) -> BuildingState:
        state.floors.floor(cmd.floor)
        units, _unit = state.units.add(
            cmd.floor, cmd.unit_type, self.numbering(state), self.ids, cmd.is_available
        )
        return state.with_parts(units=units)

    def _bulk_add_units(self, state: BuildingState, cmd: BulkAddUnits) -> BuildingState:
        state.floors.floor(cmd.floor)
        units = state.units.bulk_add(
            cmd.floor, cmd.unit_type, cmd.count, self.numbering(state), self.ids
        )
        return state.with_parts(units=units)

    def _remove_unit(self, state: BuildingState, cmd: RemoveUnit) -> BuildingState:
        return state.with_parts(units=state.units.remove(cmd.unit_id, self.numbering(state)))

    def _update_unit(self, state: BuildingState, cmd: UpdateUnit) -> BuildingState:
        changes = dict(cmd.changes)
        if "price" in changes and changes["price"] is not None:
            changes["price"] = validate_non_negative(changes["price"], field="price")
        return state.with_parts(units=state.units.update(cmd.unit_id, **changes))

    def _reconcile_units(self, state: BuildingState, cmd: ReconcileUnits) -> BuildingState:
        units = state.units.reconcile(state.floors, self.numbering(state), self.ids)
        return state.with_parts(units=units)

    # --- Building metadata --------------------------------------------------

    def _set_building_info(self, state: BuildingState, cmd: SetBuildingInfo) -> BuildingState:
        changes = {}
        if cmd.name is not None:
            changes["name"] = cmd.name
        if cmd.location is not None:
            changes["location"] = cmd.location
        return state.model_copy(update=changes) if changes else state

    def _assign_building(self, state: BuildingState, cmd: AssignBuilding) -> BuildingState:
        if not isinstance(cmd.building_id, str) or not cmd.building_id:
            raise ValidationError(
                "must be a non-empty string", field="building_id", value=cmd.building_id
            )
        code = building_code_for(cmd.building_id)
        assigned = state.model_copy(update={"building_id": cmd.building_id, "building_code": code})
        units = state.units.renumbered(self.numbering(assigned))
        logger.debug(f"Assigned building {cmd.building_id} (code {code})")
        return assigned.with_parts(units=units)
