# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Integration tests for unitmix.

Exercise the editor, derivation and commit pipeline together against the
in-memory collaborators from `tests/fakes.py`.
"""
