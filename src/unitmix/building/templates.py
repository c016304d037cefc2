# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit-type template store.

A template is the single descriptive record for one unit type across the
whole building: title, description, authoritative price, specifications,
media and features. Each unit type that becomes a listing is described by
exactly one template.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import Field, field_validator, model_validator

from ..core.primitives import (
    ImageCategoryEnum,
    Model,
    Money,
    NotFoundError,
    PositiveFloat,
    PositiveInt,
    PositiveIntGe1,
    UnitTypeCode,
    ValidationError,
)


def listing_title(building_name: str, label: str) -> str:
    """Auto-generated listing title: `"{building name} - {label}"`, or the label alone."""
    if building_name and building_name.strip():
        return f"{building_name.strip()} - {label}"
    return label


def listing_description(label: str, location: str, count: int) -> str:
    """Auto-generated listing description for a unit type without one."""
    if not location.strip():
        return f"{label} unit. {count} units available."
    return f"{label} unit at {location.strip()}. {count} units available."


def _dedupe(values: Any) -> Any:
    """Keep the first occurrence of each value; tuples behave as ordered sets."""
    if isinstance(values, (list, tuple, set, frozenset)):
        seen: Dict[Any, None] = {}
        for value in values:
            seen.setdefault(value, None)
        return tuple(seen)
    return values


class CategorizedImage(Model):
    """An image in a unit type's gallery."""

    id: str = Field(min_length=1)
    url: str = Field(min_length=1)
    category: ImageCategoryEnum = ImageCategoryEnum.GENERAL
    is_primary: bool = False
    display_order: PositiveInt = 0


class SubRoomDetail(Model):
    """A described room or area inside a unit type (bedroom, kitchen, ...)."""

    id: str = Field(min_length=1)
    kind: str = "room"
    name: str = Field(min_length=1)
    description: str = ""
    image_urls: Tuple[str, ...] = Field(default_factory=tuple)


class UnitTypeTemplate(Model):
    """
    Listing-level description of one unit type.

    The template price is authoritative: setting it rewrites the price of
    every floor entry of the same type. Media obey the primary-image rule:
    an empty gallery has no primary image, a non-empty gallery has exactly
    one.
    """

    type: UnitTypeCode
    title: str = ""
    description: str = ""
    price: Money = 0.0

    # Specifications
    bedrooms: PositiveInt
    bathrooms: PositiveInt
    area: PositiveFloat
    desk_capacity: Optional[PositiveInt] = None

    # Media
    media: Tuple[CategorizedImage, ...] = Field(default_factory=tuple)
    video_url: str = ""

    # Features & amenities (ordered sets)
    features: Tuple[str, ...] = Field(default_factory=tuple)
    amenities: Tuple[str, ...] = Field(default_factory=tuple)
    utilities: Tuple[str, ...] = Field(default_factory=tuple)

    # Additional details
    available_from: Optional[date] = None
    min_lease_term: PositiveIntGe1 = 1
    pet_policy: str = ""
    sub_rooms: Tuple[SubRoomDetail, ...] = Field(default_factory=tuple)

    @field_validator("features", "amenities", "utilities", mode="before")
    @classmethod
    def _as_ordered_set(cls, values: Any) -> Any:
        return _dedupe(values)

    @model_validator(mode="after")
    def _validate_media(self) -> "UnitTypeTemplate":
        ids = [image.id for image in self.media]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Image ids must be unique within a template, got {ids}")
        primaries = sum(1 for image in self.media if image.is_primary)
        if self.media and primaries != 1:
            raise ValueError(
                f"A non-empty gallery needs exactly one primary image, found {primaries}"
            )
        if not self.media and primaries:
            raise ValueError("An empty gallery cannot have a primary image")
        return self

    @property
    def primary_image(self) -> Optional[CategorizedImage]:
        return next((image for image in self.media if image.is_primary), None)

    # --- Media operations ---------------------------------------------------

    def _with_media(self, media: Sequence[CategorizedImage]) -> "UnitTypeTemplate":
        ordered = tuple(
            image if image.display_order == position else image.evolve(display_order=position)
            for position, image in enumerate(media)
        )
        return self.evolve(media=ordered)

    def _image_index(self, image_id: str) -> int:
        for index, image in enumerate(self.media):
            if image.id == image_id:
                return index
        raise NotFoundError(f"Image of unit type '{self.type}'", image_id)

    def with_image_added(
        self,
        image_id: str,
        url: str,
        category: ImageCategoryEnum = ImageCategoryEnum.GENERAL,
        is_primary: bool = False,
    ) -> "UnitTypeTemplate":
        """
        Append an image to the gallery.

        The first image of an empty gallery always becomes primary; asking
        for `is_primary` demotes the current primary.
        """
        if any(image.id == image_id for image in self.media):
            raise ValidationError("image id already used", field="image_id", value=image_id)
        make_primary = is_primary or not self.media
        media: List[CategorizedImage] = [
            image.evolve(is_primary=False) if make_primary and image.is_primary else image
            for image in self.media
        ]
        media.append(
            CategorizedImage(
                id=image_id,
                url=url,
                category=category,
                is_primary=make_primary,
                display_order=len(media),
            )
        )
        return self._with_media(media)

    def with_image_removed(self, image_id: str) -> "UnitTypeTemplate":
        """
        Remove an image; if it was primary the first remaining image is promoted.
        """
        index = self._image_index(image_id)
        removed = self.media[index]
        media = [image for image in self.media if image.id != image_id]
        if removed.is_primary and media:
            media[0] = media[0].evolve(is_primary=True)
        return self._with_media(media)

    def with_primary_image(self, image_id: str) -> "UnitTypeTemplate":
        self._image_index(image_id)
        media = [
            image.evolve(is_primary=image.id == image_id)
            if image.is_primary != (image.id == image_id)
            else image
            for image in self.media
        ]
        return self._with_media(media)

    def with_images_reordered(self, image_ids: Sequence[str]) -> "UnitTypeTemplate":
        """Reorder the gallery; `image_ids` must list every image exactly once."""
        current = [image.id for image in self.media]
        if sorted(image_ids) != sorted(current) or len(set(image_ids)) != len(current):
            raise ValidationError(
                "must list every image of the unit type exactly once",
                field="image_ids",
                value=list(image_ids),
            )
        by_id = {image.id: image for image in self.media}
        return self._with_media([by_id[image_id] for image_id in image_ids])


class TemplateStore(Model):
    """Unit-type templates keyed by unit type, in insertion order."""

    templates: Tuple[UnitTypeTemplate, ...] = Field(default_factory=tuple)

    @field_validator("templates")
    @classmethod
    def _validate_unique_types(
        cls, templates: Tuple[UnitTypeTemplate, ...]
    ) -> Tuple[UnitTypeTemplate, ...]:
        types = [template.type for template in templates]
        if len(types) != len(set(types)):
            raise ValueError(f"At most one template per unit type, got {types}")
        return templates

    def __len__(self) -> int:
        return len(self.templates)

    def __contains__(self, unit_type: object) -> bool:
        return any(template.type == unit_type for template in self.templates)

    def get(self, unit_type: str) -> Optional[UnitTypeTemplate]:
        return next((t for t in self.templates if t.type == unit_type), None)

    def require(self, unit_type: str) -> UnitTypeTemplate:
        template = self.get(unit_type)
        if template is None:
            raise NotFoundError("Unit-type template", unit_type)
        return template

    def types(self) -> List[str]:
        return [template.type for template in self.templates]

    def upsert(self, template: UnitTypeTemplate) -> "TemplateStore":
        """Insert or replace the template for `template.type`."""
        existing = self.get(template.type)
        if existing == template:
            return self
        if existing is None:
            return TemplateStore(templates=self.templates + (template,))
        return TemplateStore(
            templates=tuple(
                template if current.type == template.type else current
                for current in self.templates
            )
        )
