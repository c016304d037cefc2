# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

import importlib
import logging

"""
Unitmix - Floor/Unit-Type Configuration & Listing-Derivation Engine

Describe a multi-floor rental building once, keep its floor grid, unit-type
templates and individual units consistent, and derive one listing per unit
type when the building is persisted.

Key Entry Points:
- unitmix.building.BuildingEditor - Mutable edit session over a building
- unitmix.derivation.derive_listings() - One listing per unit type
- unitmix.commit.commit_building() - Persist through injected gateways
- unitmix.reporting.unit_mix_frame() - Floor x unit-type table

Example Usage:
    ```python
    from unitmix.building import BuildingEditor

    editor = BuildingEditor.new("Riverside", "12 Quay St", total_floors=3)
    editor.set_count(1, "1BR", 2)
    editor.apply_to_all_floors(1)
    editor.set_price(1, 0, 1_000_000)

    for listing in editor.derive_listings():
        print(listing.title, listing.total_unit_count, listing.price)
    ```
"""

# Libraries must not configure logging; applications attach their own handlers.
logging.getLogger(__name__).addHandler(logging.NullHandler())


# Public API surface (lazy-loaded on first attribute access)
__all__ = [  # noqa: F822 - lazy loading
    "building",
    "catalog",
    "commit",
    "core",
    "derivation",
    "numbering",
    "reporting",
]


_LAZY_MODULES = {
    "building": "unitmix.building",
    "catalog": "unitmix.catalog",
    "commit": "unitmix.commit",
    "core": "unitmix.core",
    "derivation": "unitmix.derivation",
    "numbering": "unitmix.numbering",
    "reporting": "unitmix.reporting",
}


def __getattr__(name: str):
    module_path = _LAZY_MODULES.get(name)
    if module_path is None:
        raise AttributeError(f"module 'unitmix' has no attribute '{name}'")
    module = importlib.import_module(module_path)
    globals()[name] = module
    return module
