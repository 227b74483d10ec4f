# SPDX-License-Identifier: AGPL-3.0-or-later
"""Implementations of the engine records and the engine catalog."""
from __future__ import annotations

__all__ = ["Engine", "EngineMap", "Catalog"]

from .engine import Engine
from .engine_map import EngineMap, Catalog
