"""
AnimatorAsCode - top-level entry point for build scripts.

Typical build script:

    def build(aac):
        aac.clear_previous_assets()
        layer = aac.create_main_layer()
        idle = layer.new_state("Idle")
        wave = layer.new_state("Wave")
        waving = layer.bool_parameter("Waving")
        idle.transitions_to(wave).when(waving.is_true())
        wave.transitions_to(idle).when(waving.is_false())
"""

from __future__ import annotations

import uuid
from enum import Enum

import structlog

from animator_graph.assets.container import AssetContainer
from animator_graph.builder.layers import AnimatorGenerator, LayerBuilder, LayerRemoval
from animator_graph.config import AnimatorConfig
from animator_graph.controller.models import AvatarMask, Motion, SubResource
from animator_graph.defaults import DefaultsProvider
from animator_graph.errors import StructuralViolation

logger = structlog.get_logger()

FRAMES_PER_SECOND = 60.0


class TimeUnit(str, Enum):
    FRAMES = "frames"
    SECONDS = "seconds"


class AnimatorAsCode:
    """Creates layers and generated resources inside one asset container."""

    def __init__(
        self,
        config: AnimatorConfig | None = None,
        container: AssetContainer | None = None,
        defaults: DefaultsProvider | None = None,
    ) -> None:
        self.config = config or AnimatorConfig()
        self.container = container or AssetContainer(asset_key=self.config.asset_key)
        self.defaults = defaults or DefaultsProvider(self.config)

    @property
    def controller(self):
        return self.container.controller

    # ===== Motions =====

    def new_clip(self, name: str | None = None) -> Motion:
        clip = Motion(name=self.container.generated_name(name or uuid.uuid4().hex, prefix="AAC"))
        self.container.register_sub_resource(clip)
        return clip

    def copy_clip(self, original: Motion) -> Motion:
        clip = Motion(
            name=self.container.generated_name(uuid.uuid4().hex, prefix="AAC"),
            kind=original.kind,
            duration_seconds=original.duration_seconds,
        )
        self.container.register_sub_resource(clip)
        return clip

    def new_blend_tree_as_raw(self) -> Motion:
        tree = Motion(name=self.container.generated_name(uuid.uuid4().hex), kind="blend_tree")
        self.container.register_sub_resource(tree)
        return tree

    def dummy_clip_lasting(self, amount: float, unit: TimeUnit) -> Motion:
        """An empty clip whose only property is its length."""
        unit = TimeUnit(unit)
        clip = Motion(
            name=self.container.generated_name(f"D({amount} {unit.value})", prefix="AAC"),
            duration_seconds=amount / FRAMES_PER_SECOND if unit == TimeUnit.FRAMES else amount,
        )
        self.container.register_sub_resource(clip)
        return clip

    # ===== Layers =====

    def create_main_layer(self) -> LayerBuilder:
        return self.create_layer(self.defaults.convert_layer_name(self.config.system_name))

    def create_supporting_layer(self, suffix: str) -> LayerBuilder:
        return self.create_layer(
            self.defaults.convert_layer_name_with_suffix(self.config.system_name, suffix)
        )

    def create_first_layer(self) -> LayerBuilder:
        """Rebuild the controller's first layer, whatever its name."""
        if not self.controller.layers:
            raise StructuralViolation("Controller has no layers to rebuild")
        return self.create_layer(self.controller.layers[0].name)

    def create_layer(
        self,
        name: str,
        weight: float | None = None,
        mask: AvatarMask | None = None,
    ) -> LayerBuilder:
        """Create the named layer, or empty it in place if it exists."""
        empty_motion = self.dummy_clip_lasting(1, TimeUnit.FRAMES)
        generator = AnimatorGenerator(self.controller, empty_motion, self.defaults)
        machine = generator.create_or_clear_layer_at_same_index(
            name,
            self.config.default_layer_weight if weight is None else weight,
            mask,
        )
        return LayerBuilder(self.controller, self.container, machine, name)

    def remove_layer(self, name: str) -> bool:
        return LayerRemoval(self.controller).remove_layer(name)

    # ===== Sub-resource cleanup =====

    def clear_previous_assets(self) -> list[SubResource]:
        """Drop every generated motion, blend tree and mask from the container."""
        return self.container.sweep_orphaned_sub_resources(keep=[])

    def sweep_orphaned_sub_resources(self) -> list[SubResource]:
        """Drop generated resources no layer or state references anymore."""
        return self.container.sweep_orphaned_sub_resources(
            keep=self.container.referenced_sub_resources()
        )
