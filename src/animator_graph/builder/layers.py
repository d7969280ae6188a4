"""
Layer Orchestrator - create a layer, or rebuild an existing one in place.

Rebuilding empties the layer's root state machine but keeps the layer
object, its slot in the controller's layer list and its state machine
identity. Sub-resources made by earlier passes are not reclaimed here; call
`AnimatorAsCode.clear_previous_assets()` or
`AnimatorAsCode.sweep_orphaned_sub_resources()` for that.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence

import structlog

from animator_graph.assets.container import AssetContainer
from animator_graph.builder.parameters import (
    BoolParameter,
    BoolParameterGroup,
    EnumIntParameter,
    FloatParameter,
    FloatParameterGroup,
    IntParameter,
    IntParameterGroup,
    NameOrHandle,
    ParameterHandle,
    ParameterRegistry,
)
from animator_graph.builder.states import StateHandle, StateMachineBuilder
from animator_graph.builder.transitions import EntryTransitionBuilder, TransitionBuilder
from animator_graph.controller.models import (
    AnimatorController,
    AnimatorLayer,
    AvatarMask,
    Motion,
)
from animator_graph.defaults import DefaultsProvider

logger = structlog.get_logger()

# Marker anchors in grid cells
ANY_STATE_ANCHOR = (0, 7)
ENTRY_ANCHOR = (0, -1)
EXIT_ANCHOR = (7, -1)


class AnimatorGenerator:
    """Creates or clears layers on one controller."""

    def __init__(
        self,
        controller: AnimatorController,
        empty_motion: Motion | None,
        defaults: DefaultsProvider,
    ) -> None:
        self.controller = controller
        self._empty_motion = empty_motion
        self._defaults = defaults

    def create_or_clear_layer_at_same_index(
        self,
        layer_name: str,
        weight_when_creating: float,
        mask_when_creating: AvatarMask | None = None,
    ) -> StateMachineBuilder:
        """
        Return a builder over an empty root state machine for `layer_name`.

        An existing layer keeps its index; a new one is appended.
        """
        index = self.controller.find_layer_index(layer_name)
        if index != -1:
            self.controller.layers[index].state_machine.clear()
            logger.info("Cleared layer", layer=layer_name, index=index)
        else:
            unique_name = self.controller.make_unique_layer_name(layer_name)
            self.controller.add_layer(unique_name)
            index = len(self.controller.layers) - 1
            logger.info("Created layer", layer=unique_name, index=index)

        layer = self.controller.layers[index]
        layer.avatar_mask = mask_when_creating
        layer.default_weight = weight_when_creating

        builder = StateMachineBuilder(
            layer.state_machine,
            self._empty_motion,
            ParameterRegistry(self.controller),
            self._defaults,
        )
        return (
            builder.with_any_state_position(*ANY_STATE_ANCHOR)
            .with_entry_position(*ENTRY_ANCHOR)
            .with_exit_position(*EXIT_ANCHOR)
        )


class LayerRemoval:
    """Removes layers by name. Removing a missing layer does nothing."""

    def __init__(self, controller: AnimatorController) -> None:
        self.controller = controller

    def remove_layer(self, layer_name: str) -> bool:
        index = self.controller.find_layer_index(layer_name)
        if index == -1:
            logger.info("Layer not found, nothing to remove", layer=layer_name)
            return False

        self.controller.remove_layer(index)
        logger.info("Removed layer", layer=layer_name, index=index)
        return True


class LayerBuilder:
    """Entry point for building one layer's graph."""

    def __init__(
        self,
        controller: AnimatorController,
        container: AssetContainer,
        machine: StateMachineBuilder,
        layer_name: str,
    ) -> None:
        self.controller = controller
        self._container = container
        self._machine = machine
        self._layer_name = layer_name

    @property
    def name(self) -> str:
        return self._layer_name

    @property
    def layer(self) -> AnimatorLayer:
        for layer in self.controller.layers:
            if layer.state_machine is self._machine.machine:
                return layer
        raise LookupError(f"Layer '{self._layer_name}' is no longer part of the controller")

    @property
    def parameters(self) -> ParameterRegistry:
        return self._machine.parameters

    # ===== States =====

    def new_state(self, name: str, x: int | None = None, y: int | None = None) -> StateHandle:
        """
        Create a state.

        Without coordinates the state goes one cell right of the most recent
        state, or at the origin when the layer has no states yet.
        """
        if (x is None) != (y is None):
            raise TypeError("new_state takes both x and y, or neither")
        if x is not None and y is not None:
            return self._machine.new_state(name, x, y)

        last_position = self._machine.last_state_position()
        state = self._machine.new_state(name, 0, 0)
        if last_position is not None:
            state.shift_from_position(last_position, 1, 0)
        return state

    def any_transitions_to(self, destination: StateHandle) -> TransitionBuilder:
        return self._machine.any_transitions_to(destination)

    def entry_transitions_to(self, destination: StateHandle) -> EntryTransitionBuilder:
        return self._machine.entry_transitions_to(destination)

    # ===== Parameters =====

    def bool_parameter(self, name: str) -> BoolParameter:
        return self.parameters.bool_parameter(name)

    def trigger_parameter_as_bool(self, name: str) -> BoolParameter:
        return self.parameters.trigger_parameter_as_bool(name)

    def float_parameter(self, name: str) -> FloatParameter:
        return self.parameters.float_parameter(name)

    def int_parameter(self, name: str) -> IntParameter:
        return self.parameters.int_parameter(name)

    def enum_parameter(self, name: str, enum_type: type[Enum]) -> EnumIntParameter:
        return self.parameters.enum_parameter(name, enum_type)

    def bool_parameters(self, *names: NameOrHandle) -> BoolParameterGroup:
        return self.parameters.bool_parameters(*names)

    def trigger_parameters_as_bools(self, *names: NameOrHandle) -> BoolParameterGroup:
        return self.parameters.trigger_parameters_as_bools(*names)

    def float_parameters(self, *names: NameOrHandle) -> FloatParameterGroup:
        return self.parameters.float_parameters(*names)

    def int_parameters(self, *names: NameOrHandle) -> IntParameterGroup:
        return self.parameters.int_parameters(*names)

    def override_value(self, parameter: ParameterHandle, value: bool | int | float) -> None:
        self.parameters.override_value(parameter, value)

    # ===== Masks =====

    def with_avatar_mask(self, mask: AvatarMask | None) -> LayerBuilder:
        self.layer.avatar_mask = mask
        return self

    def with_avatar_mask_no_transforms(self) -> LayerBuilder:
        return self.resolve_avatar_mask([])

    def resolve_avatar_mask(self, paths: Sequence[str]) -> LayerBuilder:
        """Generate a mask enabling exactly these transform paths."""
        mask = AvatarMask(name=self._container.generated_name(f"{self._layer_name}__AvatarMask"))
        if not paths:
            # An empty transform list would enable everything
            mask.transforms = [("_ignored", False)]
        else:
            mask.transforms = [(path, True) for path in paths]
        mask.humanoid_body_parts_active = False

        self._container.register_sub_resource(mask)
        return self.with_avatar_mask(mask)
