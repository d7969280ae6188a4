"""
Animator Graph: declarative builder for animation controller state graphs.

A build script describes layers, states and guarded transitions through
fluent calls. Re-running the script rebuilds each named layer in place, so
the controller never accumulates duplicate states or transitions.
"""

__version__ = "0.1.0"

from animator_graph.assets.container import AssetContainer
from animator_graph.builder.base import AnimatorAsCode, TimeUnit
from animator_graph.config import AnimatorConfig
from animator_graph.errors import (
    AnimatorGraphError,
    AssetFormatError,
    ParameterKindConflict,
    StructuralViolation,
)

__all__ = [
    "AnimatorAsCode",
    "AnimatorConfig",
    "AssetContainer",
    "TimeUnit",
    "AnimatorGraphError",
    "AssetFormatError",
    "ParameterKindConflict",
    "StructuralViolation",
]
