"""Asset container: sub-resource registration, naming and persistence."""

from .container import AssetContainer

__all__ = ["AssetContainer"]
