# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unitmix test suite.

Unit tests cover each store and algorithm on its own; integration tests
drive full edit sessions through the commit pipeline against in-memory
collaborators.
"""
