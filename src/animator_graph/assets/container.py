"""
AssetContainer - One saved unit: a controller plus its generated sub-resources.

Responsibilities:
- Register generated sub-resources (motions, blend trees, masks)
- Sweep sub-resources left over from a previous build pass
- Hand out collision-free names for generated resources
- Save/load the whole unit as a YAML document
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

import structlog
import yaml

from animator_graph.controller.models import (
    AnimatorController,
    AvatarMask,
    Motion,
    SubResource,
    sub_resource_from_dict,
)
from animator_graph.errors import AssetFormatError

logger = structlog.get_logger()

ASSET_FORMAT_VERSION = 1


def _utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


class AssetContainer:
    """
    Holds a controller and the sub-resources generated for it.

    Generated names are `<prefix>__<asset_key>__<suffix>_<n>`, where n is a
    per-container counter. The counter only grows, so names stay distinct
    across rebuilds without relying on random suffixes.
    """

    def __init__(
        self,
        controller: AnimatorController | None = None,
        asset_key: str = "asset",
        path: Path | None = None,
    ) -> None:
        self.controller = controller or AnimatorController(name=asset_key)
        self.asset_key = asset_key
        self.path = path
        self.sub_resources: list[SubResource] = []
        self._name_counter = 0

    # ===== Naming =====

    def unique_name(self, base: str) -> str:
        """Return a name that collides with no registered sub-resource."""
        taken = {r.name for r in self.sub_resources}
        while True:
            self._name_counter += 1
            candidate = f"{base}_{self._name_counter}"
            if candidate not in taken:
                return candidate

    def generated_name(self, suffix: str, prefix: str = "zAutogenerated") -> str:
        return self.unique_name(f"{prefix}__{self.asset_key}__{suffix}")

    # ===== Sub-resources =====

    def register_sub_resource(self, resource: SubResource) -> SubResource:
        """Attach a generated resource so it is saved with this container."""
        if any(r is resource for r in self.sub_resources):
            return resource
        self.sub_resources.append(resource)
        logger.debug("Registered sub-resource", name=resource.name, type=type(resource).__name__)
        return resource

    def get_sub_resource(self, name: str) -> SubResource | None:
        for resource in self.sub_resources:
            if resource.name == name:
                return resource
        return None

    def sweep_orphaned_sub_resources(self, keep: Iterable[SubResource] = ()) -> list[SubResource]:
        """
        Remove every registered sub-resource not in keep.

        Returns the removed resources.
        """
        keep_ids = {id(r) for r in keep}
        removed = [r for r in self.sub_resources if id(r) not in keep_ids]
        self.sub_resources = [r for r in self.sub_resources if id(r) in keep_ids]

        logger.info(
            "Swept sub-resources",
            removed=len(removed),
            kept=len(self.sub_resources),
            asset_key=self.asset_key,
        )
        return removed

    def referenced_sub_resources(self) -> list[SubResource]:
        """Sub-resources that some layer or state still points at."""
        referenced: list[SubResource] = []
        seen: set[int] = set()

        def _add(resource: SubResource | None) -> None:
            if resource is None or id(resource) in seen:
                return
            if any(r is resource for r in self.sub_resources):
                seen.add(id(resource))
                referenced.append(resource)

        for layer in self.controller.layers:
            _add(layer.avatar_mask)
            machines = [layer.state_machine]
            while machines:
                machine = machines.pop()
                machines.extend(machine.state_machines)
                for state in machine.states:
                    _add(state.motion)
        return referenced

    # ===== Persistence =====

    def to_dict(self) -> dict[str, Any]:
        return {
            "format_version": ASSET_FORMAT_VERSION,
            "asset_key": self.asset_key,
            "saved_at": _utc_now().isoformat().replace("+00:00", "Z"),
            "name_counter": self._name_counter,
            "controller": self.controller.to_dict(),
            "sub_resources": [r.to_dict() for r in self.sub_resources],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: Path | None = None) -> AssetContainer:
        if not isinstance(data, dict) or "controller" not in data:
            raise AssetFormatError("Asset document has no controller section")

        version = data.get("format_version", ASSET_FORMAT_VERSION)
        if version != ASSET_FORMAT_VERSION:
            raise AssetFormatError(f"Unsupported asset format version: {version}")

        sub_resources = [sub_resource_from_dict(r) for r in data.get("sub_resources", []) or []]
        by_name = {r.name: r for r in sub_resources}

        container = cls(
            controller=AnimatorController.from_dict(data["controller"], by_name),
            asset_key=str(data.get("asset_key", "asset")),
            path=path,
        )
        container.sub_resources = sub_resources
        container._name_counter = int(data.get("name_counter", 0))
        return container

    def save(self, path: Path | None = None) -> Path:
        """Write the container as YAML."""
        target = path or self.path
        if target is None:
            raise ValueError("No path given and container has no path")

        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w") as f:
            yaml.safe_dump(self.to_dict(), f, sort_keys=False)

        self.path = target
        logger.info(
            "Saved asset",
            path=str(target),
            layers=len(self.controller.layers),
            sub_resources=len(self.sub_resources),
        )
        return target

    @classmethod
    def load(cls, path: Path) -> AssetContainer:
        """Read a container from YAML."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise AssetFormatError(f"Invalid YAML in {path}: {e}") from e

        container = cls.from_dict(data, path=path)
        logger.info(
            "Loaded asset",
            path=str(path),
            layers=len(container.controller.layers),
            sub_resources=len(container.sub_resources),
        )
        return container

    @classmethod
    def load_or_create(cls, path: Path, asset_key: str = "asset") -> AssetContainer:
        if path.exists():
            return cls.load(path)
        return cls(asset_key=asset_key, path=path)


def count_by_type(resources: Iterable[SubResource]) -> dict[str, int]:
    """Count resources per kind, e.g. for status output."""
    counts: dict[str, int] = {}
    for resource in resources:
        if isinstance(resource, Motion):
            key = resource.kind
        elif isinstance(resource, AvatarMask):
            key = "avatar_mask"
        else:
            key = type(resource).__name__
        counts[key] = counts.get(key, 0) + 1
    return counts
