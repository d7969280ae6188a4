"""
Exceptions raised by the graph builder.

Removing a layer that does not exist is not an error; it is logged and
ignored by the layer orchestrator.
"""

from __future__ import annotations


class AnimatorGraphError(Exception):
    """Base exception for animator graph errors."""

    pass


class StructuralViolation(AnimatorGraphError):
    """A builder call is not legal for the current graph or chain position."""

    pass


class ParameterKindConflict(AnimatorGraphError):
    """A parameter name was requested with a different kind than declared."""

    def __init__(self, name: str, existing: str, requested: str) -> None:
        self.name = name
        self.existing = existing
        self.requested = requested
        super().__init__(
            f"Parameter '{name}' is declared as {existing}, cannot re-declare as {requested}"
        )


class AssetFormatError(AnimatorGraphError):
    """A persisted asset document could not be decoded."""

    pass
