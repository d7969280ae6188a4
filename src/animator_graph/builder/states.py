"""
Graph Builder - states, markers and transitions of one sub-graph.

Positions are stored in display pixels; builder calls take grid cells and
multiply by the configured grid unit.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from animator_graph.builder.parameters import (
    BoolParameter,
    BoolParameterGroup,
    FloatParameter,
    IntParameter,
    ParameterHandle,
    ParameterRegistry,
)
from animator_graph.builder.transitions import EntryTransitionBuilder, TransitionBuilder
from animator_graph.controller.models import (
    AnimatorState,
    AnimatorTransition,
    Motion,
    Position,
    StateBehaviour,
    StateMachine,
)
from animator_graph.defaults import DefaultsProvider
from animator_graph.errors import StructuralViolation

PARAMETER_DRIVER = "parameter_driver"
TRACKING_CONTROL = "tracking_control"
LOCOMOTION_CONTROL = "locomotion_control"


class TrackingElement(str, Enum):
    HEAD = "head"
    LEFT_HAND = "left_hand"
    RIGHT_HAND = "right_hand"
    HIP = "hip"
    LEFT_FOOT = "left_foot"
    RIGHT_FOOT = "right_foot"
    LEFT_FINGERS = "left_fingers"
    RIGHT_FINGERS = "right_fingers"
    EYES = "eyes"
    MOUTH = "mouth"


class TrackingType(str, Enum):
    NO_CHANGE = "no_change"
    TRACKING = "tracking"
    ANIMATION = "animation"


def _require_member(machine: StateMachine, state: AnimatorState, role: str) -> None:
    if not machine.contains(state):
        raise StructuralViolation(
            f"Transition {role} '{state.name}' is not part of '{machine.name}'"
        )


class StateMachineBuilder:
    """Creates states and marker transitions inside one state machine."""

    def __init__(
        self,
        machine: StateMachine,
        empty_motion: Motion | None,
        parameters: ParameterRegistry,
        defaults: DefaultsProvider,
    ) -> None:
        machine.record_undo = False
        self.machine = machine
        self.parameters = parameters
        self._empty_motion = empty_motion
        self._defaults = defaults

    def with_entry_position(self, x: int, y: int) -> StateMachineBuilder:
        self.machine.entry_position = self.grid_position(x, y)
        return self

    def with_exit_position(self, x: int, y: int) -> StateMachineBuilder:
        self.machine.exit_position = self.grid_position(x, y)
        return self

    def with_any_state_position(self, x: int, y: int) -> StateMachineBuilder:
        self.machine.any_state_position = self.grid_position(x, y)
        return self

    def new_state(self, name: str, x: int, y: int) -> StateHandle:
        """Create a state at grid cell (x, y). Names are not deduplicated."""
        state = self.machine.add_state(name, self.grid_position(x, y))
        self._defaults.configure_state(state, self._empty_motion)
        return StateHandle(state, self.machine, self._defaults)

    def any_transitions_to(self, destination: StateHandle) -> TransitionBuilder:
        _require_member(self.machine, destination.state, "destination")
        transition = self.machine.add_any_state_transition(destination.state)
        self._defaults.configure_transition(transition)
        return TransitionBuilder(transition, self.machine)

    def entry_transitions_to(self, destination: StateHandle) -> EntryTransitionBuilder:
        _require_member(self.machine, destination.state, "destination")
        transition = self.machine.add_entry_transition(destination.state)
        self._defaults.configure_transition(transition)
        return EntryTransitionBuilder(transition, self.machine)

    def last_state_position(self) -> Position | None:
        """Display position of the most recent state, None when empty."""
        if not self.machine.states:
            return None
        return self.machine.states[-1].position

    def grid_position(self, x: int, y: int) -> Position:
        grid_x, grid_y = self._defaults.grid()
        return (x * grid_x, y * grid_y)


class StateHandle:
    """Fluent handle over one state."""

    def __init__(
        self,
        state: AnimatorState,
        machine: StateMachine,
        defaults: DefaultsProvider,
    ) -> None:
        state.record_undo = False
        self.state = state
        self._machine = machine
        self._defaults = defaults

    @property
    def name(self) -> str:
        return self.state.name

    @property
    def grid_position(self) -> tuple[int, int]:
        grid_x, grid_y = self._defaults.grid()
        x, y = self.state.position
        return (round(x / grid_x), round(y / grid_y))

    # ===== Positioning =====

    def left_of(self, other: StateHandle | None = None) -> StateHandle:
        return self._move_next_to(other, -1, 0)

    def right_of(self, other: StateHandle | None = None) -> StateHandle:
        return self._move_next_to(other, 1, 0)

    def over(self, other: StateHandle | None = None) -> StateHandle:
        return self._move_next_to(other, 0, -1)

    def under(self, other: StateHandle | None = None) -> StateHandle:
        return self._move_next_to(other, 0, 1)

    def shift(self, other: StateHandle | None, shift_x: int, shift_y: int) -> StateHandle:
        """
        Place this state shift_x/shift_y cells away from another state.

        With no other state, the anchor is the second-to-last state created.
        """
        return self._move_next_to(other, shift_x, shift_y)

    def shift_from_position(self, position: Position, shift_x: int, shift_y: int) -> StateHandle:
        """Place this state relative to a display position."""
        grid_x, grid_y = self._defaults.grid()
        self.state.position = (position[0] + shift_x * grid_x, position[1] + shift_y * grid_y)
        return self

    def _move_next_to(self, other: StateHandle | None, shift_x: int, shift_y: int) -> StateHandle:
        if other is None:
            if len(self._machine.states) < 2:
                raise StructuralViolation(
                    f"Cannot place '{self.name}' next to the second-to-last state: "
                    f"'{self._machine.name}' has {len(self._machine.states)} state(s)"
                )
            anchor = self._machine.states[-2]
        else:
            if not self._machine.contains(other.state):
                raise StructuralViolation(
                    f"Anchor state '{other.name}' is not part of '{self._machine.name}'"
                )
            anchor = other.state

        return self.shift_from_position(anchor.position, shift_x, shift_y)

    # ===== State settings =====

    def with_animation(self, motion: Motion) -> StateHandle:
        self.state.motion = motion
        return self

    def with_write_defaults_set_to(self, should_write_defaults: bool) -> StateHandle:
        self.state.write_default_values = should_write_defaults
        return self

    def motion_time(self, parameter: FloatParameter) -> StateHandle:
        self.state.time_parameter = parameter.name
        return self

    def with_speed(self, parameter: FloatParameter) -> StateHandle:
        self.state.speed_parameter = parameter.name
        return self

    # ===== Transitions =====

    def transitions_to(self, destination: StateHandle) -> TransitionBuilder:
        self._require_endpoints(destination)
        return TransitionBuilder(
            self._configure(self.state.add_transition(destination.state)), self._machine
        )

    def transitions_from_any(self) -> TransitionBuilder:
        self._require_endpoints()
        return TransitionBuilder(
            self._configure(self._machine.add_any_state_transition(self.state)), self._machine
        )

    def transitions_from_entry(self) -> EntryTransitionBuilder:
        self._require_endpoints()
        return EntryTransitionBuilder(
            self._configure(self._machine.add_entry_transition(self.state)), self._machine
        )

    def automatically_moves_to(self, destination: StateHandle) -> StateHandle:
        """Unconditional transition taken when the motion finishes."""
        self._require_endpoints(destination)
        transition = self._configure(self.state.add_transition(destination.state))
        transition.has_exit_time = True
        transition.record_undo = False
        return self

    def exits(self) -> TransitionBuilder:
        self._require_endpoints()
        return TransitionBuilder(self._configure(self.state.add_exit_transition()), self._machine)

    def _require_endpoints(self, destination: StateHandle | None = None) -> None:
        # Handles from before a rebuild point at discarded states
        _require_member(self._machine, self.state, "source")
        if destination is not None:
            _require_member(self._machine, destination.state, "destination")

    def _configure(self, transition: AnimatorTransition) -> AnimatorTransition:
        self._defaults.configure_transition(transition)
        return transition

    # ===== Behaviours =====

    def behaviour(self, kind: str) -> StateBehaviour:
        """Get the behaviour of this kind, attaching it on first use."""
        existing = self.state.get_behaviour(kind)
        if existing is not None:
            return existing
        return self.state.add_behaviour(kind)

    def sets(self, kind: str, field_name: str, value: Any) -> StateHandle:
        self.behaviour(kind).fields[field_name] = value
        return self

    def _driver_entries(self) -> list[dict[str, Any]]:
        return self.behaviour(PARAMETER_DRIVER).fields.setdefault("parameters", [])

    def drives(
        self,
        parameter: ParameterHandle | BoolParameterGroup,
        value: bool | int | float,
    ) -> StateHandle:
        entries = self._driver_entries()
        targets = list(parameter) if isinstance(parameter, BoolParameterGroup) else [parameter]
        for target in targets:
            if isinstance(target, BoolParameter):
                entries.append({"type": "set", "name": target.name, "value": 1 if value else 0})
            else:
                entries.append({"type": "set", "name": target.name, "value": value})
        return self

    def driving_increases(self, parameter: IntParameter | FloatParameter, amount: float) -> StateHandle:
        self._driver_entries().append({"type": "add", "name": parameter.name, "value": amount})
        return self

    def driving_decreases(
        self, parameter: IntParameter | FloatParameter, positive_amount: float
    ) -> StateHandle:
        self._driver_entries().append(
            {"type": "add", "name": parameter.name, "value": -positive_amount}
        )
        return self

    def driving_randomizes(
        self,
        parameter: IntParameter | FloatParameter,
        minimum: float,
        maximum: float,
        locally: bool = False,
    ) -> StateHandle:
        self._driver_entries().append(
            {"type": "random", "name": parameter.name, "value_min": minimum, "value_max": maximum}
        )
        if locally:
            self.driving_locally()
        return self

    def driving_randomizes_chance(self, parameter: BoolParameter, chance: float) -> StateHandle:
        """Randomly set a bool to true with the given chance, locally only."""
        self._driver_entries().append({"type": "random", "name": parameter.name, "chance": chance})
        return self.driving_locally()

    def driving_copies(self, source: ParameterHandle, destination: ParameterHandle) -> StateHandle:
        self._driver_entries().append(
            {
                "type": "copy",
                "source": source.name,
                "name": destination.name,
                "convert_range": False,
            }
        )
        return self

    def driving_remaps(
        self,
        source: ParameterHandle,
        source_min: float,
        source_max: float,
        destination: ParameterHandle,
        destination_min: float,
        destination_max: float,
    ) -> StateHandle:
        self._driver_entries().append(
            {
                "type": "copy",
                "source": source.name,
                "name": destination.name,
                "convert_range": True,
                "source_min": source_min,
                "source_max": source_max,
                "dest_min": destination_min,
                "dest_max": destination_max,
            }
        )
        return self

    def driving_locally(self) -> StateHandle:
        return self.sets(PARAMETER_DRIVER, "local_only", True)

    def tracking_sets(self, element: TrackingElement, tracking_type: TrackingType) -> StateHandle:
        field_name = f"tracking_{TrackingElement(element).value}"
        return self.sets(TRACKING_CONTROL, field_name, TrackingType(tracking_type).value)

    def tracking_tracks(self, element: TrackingElement) -> StateHandle:
        return self.tracking_sets(element, TrackingType.TRACKING)

    def tracking_animates(self, element: TrackingElement) -> StateHandle:
        return self.tracking_sets(element, TrackingType.ANIMATION)

    def prints_to_log_using_tracking_behaviour(self, value: str) -> StateHandle:
        return self.sets(TRACKING_CONTROL, "debug_string", value)

    def locomotion_enabled(self) -> StateHandle:
        return self.sets(LOCOMOTION_CONTROL, "disable_locomotion", False)

    def locomotion_disabled(self) -> StateHandle:
        return self.sets(LOCOMOTION_CONTROL, "disable_locomotion", True)
