"""
Data models for animator controllers.

A controller holds an ordered list of parameters and an ordered list of
layers. Each layer owns one root state machine (sub-graph) with its states,
the Entry/Exit/Any-State markers and the transitions between them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Union

from animator_graph.errors import AssetFormatError


class ParameterKind(str, Enum):
    """Types of controller parameters."""

    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    TRIGGER = "trigger"


class ConditionMode(str, Enum):
    """Comparison applied by a transition condition."""

    IF = "if"  # bool/trigger is true
    IF_NOT = "if_not"
    GREATER = "greater"
    LESS = "less"
    EQUALS = "equals"
    NOT_EQUAL = "not_equal"


class Marker(str, Enum):
    """Special graph nodes every state machine carries."""

    ANY_STATE = "any_state"
    ENTRY = "entry"
    EXIT = "exit"


class InterruptionSource(str, Enum):
    """Which transitions may interrupt a running transition."""

    NONE = "none"
    SOURCE = "source"
    DESTINATION = "destination"
    SOURCE_THEN_DESTINATION = "source_then_destination"
    DESTINATION_THEN_SOURCE = "destination_then_source"


Position = tuple[float, float]


@dataclass
class ControllerParameter:
    """A declared controller parameter."""

    name: str
    kind: ParameterKind
    default_bool: bool = False
    default_int: int = 0
    default_float: float = 0.0

    @property
    def default(self) -> bool | int | float:
        if self.kind == ParameterKind.INT:
            return self.default_int
        if self.kind == ParameterKind.FLOAT:
            return self.default_float
        return self.default_bool

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ControllerParameter:
        kind = ParameterKind(data.get("kind", "bool"))
        param = cls(name=str(data["name"]), kind=kind)
        default = data.get("default")
        if default is not None:
            if kind == ParameterKind.INT:
                param.default_int = int(default)
            elif kind == ParameterKind.FLOAT:
                param.default_float = float(default)
            else:
                param.default_bool = bool(default)
        return param

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "kind": self.kind.value, "default": self.default}


@dataclass(frozen=True)
class Condition:
    """One comparison clause on a transition."""

    parameter: str
    mode: ConditionMode
    threshold: float = 0.0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Condition:
        return cls(
            parameter=str(data["parameter"]),
            mode=ConditionMode(data["mode"]),
            threshold=float(data.get("threshold", 0.0)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"parameter": self.parameter, "mode": self.mode.value, "threshold": self.threshold}


@dataclass(eq=False)
class Motion:
    """Opaque motion reference (clip or blend tree)."""

    name: str
    kind: str = "clip"  # clip, blend_tree, external
    duration_seconds: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Motion:
        duration = data.get("duration_seconds")
        return cls(
            name=str(data["name"]),
            kind=str(data.get("kind", "clip")),
            duration_seconds=float(duration) if duration is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "motion",
            "name": self.name,
            "kind": self.kind,
            "duration_seconds": self.duration_seconds,
        }


@dataclass(eq=False)
class AvatarMask:
    """Layer mask: which transform paths a layer may animate."""

    name: str
    transforms: list[tuple[str, bool]] = field(default_factory=list)
    humanoid_body_parts_active: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AvatarMask:
        return cls(
            name=str(data["name"]),
            transforms=[
                (str(t["path"]), bool(t.get("active", True)))
                for t in data.get("transforms", []) or []
            ],
            humanoid_body_parts_active=bool(data.get("humanoid_body_parts_active", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "avatar_mask",
            "name": self.name,
            "transforms": [{"path": path, "active": active} for path, active in self.transforms],
            "humanoid_body_parts_active": self.humanoid_body_parts_active,
        }


SubResource = Union[Motion, AvatarMask]


def sub_resource_from_dict(data: dict[str, Any]) -> SubResource:
    """Decode a sub-resource by its type tag."""
    resource_type = data.get("type")
    if resource_type == "motion":
        return Motion.from_dict(data)
    if resource_type == "avatar_mask":
        return AvatarMask.from_dict(data)
    raise AssetFormatError(f"Unknown sub-resource type: {resource_type!r}")


@dataclass
class StateBehaviour:
    """Opaque side-effect behaviour attached to a state."""

    kind: str
    fields: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "fields": self.fields}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StateBehaviour:
        return cls(kind=str(data["kind"]), fields=dict(data.get("fields") or {}))


@dataclass(eq=False)
class AnimatorTransition:
    """A guarded edge. Conditions on one transition are AND-ed."""

    source: AnimatorState | Marker
    destination: AnimatorState | Marker
    conditions: list[Condition] = field(default_factory=list)

    # Timing
    duration: float = 0.0
    offset: float = 0.0
    exit_time: float = 0.0
    has_exit_time: bool = False
    has_fixed_duration: bool = True

    # Interruption
    interruption_source: InterruptionSource = InterruptionSource.NONE
    ordered_interruption: bool = True
    can_transition_to_self: bool = False

    record_undo: bool = True

    @property
    def is_any_state(self) -> bool:
        return self.source is Marker.ANY_STATE

    @property
    def is_entry(self) -> bool:
        return self.source is Marker.ENTRY

    @property
    def is_exit(self) -> bool:
        return self.destination is Marker.EXIT

    def add_condition(self, mode: ConditionMode, threshold: float, parameter: str) -> Condition:
        condition = Condition(parameter=parameter, mode=mode, threshold=float(threshold))
        self.conditions.append(condition)
        return condition

    def copy_settings_from(self, template: AnimatorTransition) -> None:
        """Copy every non-condition attribute of the template."""
        self.duration = template.duration
        self.offset = template.offset
        self.interruption_source = template.interruption_source
        self.ordered_interruption = template.ordered_interruption
        self.exit_time = template.exit_time
        self.has_exit_time = template.has_exit_time
        self.has_fixed_duration = template.has_fixed_duration
        self.can_transition_to_self = template.can_transition_to_self

    def settings(self) -> dict[str, Any]:
        return {
            "duration": self.duration,
            "offset": self.offset,
            "exit_time": self.exit_time,
            "has_exit_time": self.has_exit_time,
            "has_fixed_duration": self.has_fixed_duration,
            "interruption_source": self.interruption_source.value,
            "ordered_interruption": self.ordered_interruption,
            "can_transition_to_self": self.can_transition_to_self,
        }

    def to_dict(self, index_of: Callable[[AnimatorState], int]) -> dict[str, Any]:
        destination: int | str
        if isinstance(self.destination, Marker):
            destination = self.destination.value
        else:
            destination = index_of(self.destination)
        return {
            "destination": destination,
            "conditions": [c.to_dict() for c in self.conditions],
            **self.settings(),
        }

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        source: AnimatorState | Marker,
        states: list[AnimatorState],
    ) -> AnimatorTransition:
        raw_destination = data.get("destination")
        destination: AnimatorState | Marker
        if isinstance(raw_destination, str):
            destination = Marker(raw_destination)
        else:
            try:
                destination = states[int(raw_destination)]
            except (TypeError, ValueError, IndexError) as e:
                raise AssetFormatError(f"Bad transition destination: {raw_destination!r}") from e

        return cls(
            source=source,
            destination=destination,
            conditions=[Condition.from_dict(c) for c in data.get("conditions", []) or []],
            duration=float(data.get("duration", 0.0)),
            offset=float(data.get("offset", 0.0)),
            exit_time=float(data.get("exit_time", 0.0)),
            has_exit_time=bool(data.get("has_exit_time", False)),
            has_fixed_duration=bool(data.get("has_fixed_duration", True)),
            interruption_source=InterruptionSource(data.get("interruption_source", "none")),
            ordered_interruption=bool(data.get("ordered_interruption", True)),
            can_transition_to_self=bool(data.get("can_transition_to_self", False)),
        )


@dataclass(eq=False)
class AnimatorState:
    """A node of a state machine."""

    name: str
    position: Position = (0.0, 0.0)
    motion: Motion | None = None
    write_default_values: bool = True
    speed_parameter: str | None = None
    time_parameter: str | None = None
    behaviours: list[StateBehaviour] = field(default_factory=list)
    transitions: list[AnimatorTransition] = field(default_factory=list)
    record_undo: bool = True

    def add_transition(self, destination: AnimatorState) -> AnimatorTransition:
        transition = AnimatorTransition(source=self, destination=destination)
        self.transitions.append(transition)
        return transition

    def add_exit_transition(self) -> AnimatorTransition:
        transition = AnimatorTransition(source=self, destination=Marker.EXIT)
        self.transitions.append(transition)
        return transition

    def add_behaviour(self, kind: str) -> StateBehaviour:
        behaviour = StateBehaviour(kind=kind)
        self.behaviours.append(behaviour)
        return behaviour

    def get_behaviour(self, kind: str) -> StateBehaviour | None:
        for behaviour in self.behaviours:
            if behaviour.kind == kind:
                return behaviour
        return None


@dataclass(eq=False)
class StateMachine:
    """A sub-graph: states, markers and the transitions between them."""

    name: str
    states: list[AnimatorState] = field(default_factory=list)
    state_machines: list[StateMachine] = field(default_factory=list)
    any_state_transitions: list[AnimatorTransition] = field(default_factory=list)
    entry_transitions: list[AnimatorTransition] = field(default_factory=list)

    any_state_position: Position = (0.0, 0.0)
    entry_position: Position = (0.0, 0.0)
    exit_position: Position = (0.0, 0.0)

    record_undo: bool = True

    def add_state(self, name: str, position: Position) -> AnimatorState:
        state = AnimatorState(name=name, position=position)
        self.states.append(state)
        return state

    def add_any_state_transition(self, destination: AnimatorState) -> AnimatorTransition:
        transition = AnimatorTransition(source=Marker.ANY_STATE, destination=destination)
        self.any_state_transitions.append(transition)
        return transition

    def add_entry_transition(self, destination: AnimatorState) -> AnimatorTransition:
        transition = AnimatorTransition(source=Marker.ENTRY, destination=destination)
        self.entry_transitions.append(transition)
        return transition

    def contains(self, state: AnimatorState) -> bool:
        return any(s is state for s in self.states)

    def index_of(self, state: AnimatorState) -> int:
        for index, candidate in enumerate(self.states):
            if candidate is state:
                return index
        raise ValueError(f"State '{state.name}' does not belong to '{self.name}'")

    def all_transitions(self) -> list[AnimatorTransition]:
        """Every transition owned by this sub-graph, nested ones excluded."""
        transitions = list(self.entry_transitions) + list(self.any_state_transitions)
        for state in self.states:
            transitions.extend(state.transitions)
        return transitions

    def transitions_between(
        self,
        source: AnimatorState | Marker,
        destination: AnimatorState | Marker,
    ) -> list[AnimatorTransition]:
        return [
            t
            for t in self.all_transitions()
            if t.source is source and t.destination is destination
        ]

    def clear(self) -> None:
        """Empty the sub-graph in place, keeping markers and identity."""
        for child in self.state_machines:
            child.states = []
            child.entry_transitions = []
            child.any_state_transitions = []
        self.state_machines = []
        self.states = []
        self.entry_transitions = []
        self.any_state_transitions = []

    @property
    def is_empty(self) -> bool:
        return not (
            self.states
            or self.state_machines
            or self.entry_transitions
            or self.any_state_transitions
        )

    def to_dict(self) -> dict[str, Any]:
        index_of = self.index_of
        return {
            "name": self.name,
            "any_state_position": list(self.any_state_position),
            "entry_position": list(self.entry_position),
            "exit_position": list(self.exit_position),
            "states": [
                {
                    "name": state.name,
                    "position": list(state.position),
                    "motion": state.motion.name if state.motion else None,
                    "write_default_values": state.write_default_values,
                    "speed_parameter": state.speed_parameter,
                    "time_parameter": state.time_parameter,
                    "behaviours": [b.to_dict() for b in state.behaviours],
                    "transitions": [t.to_dict(index_of) for t in state.transitions],
                }
                for state in self.states
            ],
            "any_state_transitions": [t.to_dict(index_of) for t in self.any_state_transitions],
            "entry_transitions": [t.to_dict(index_of) for t in self.entry_transitions],
            "state_machines": [child.to_dict() for child in self.state_machines],
        }

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        motions: dict[str, Motion] | None = None,
    ) -> StateMachine:
        """Create a state machine; motions are resolved by name."""
        motions = motions or {}
        machine = cls(
            name=str(data.get("name", "")),
            any_state_position=_position(data.get("any_state_position")),
            entry_position=_position(data.get("entry_position")),
            exit_position=_position(data.get("exit_position")),
        )

        states_data = data.get("states", []) or []
        for state_data in states_data:
            motion_name = state_data.get("motion")
            motion = None
            if motion_name:
                motion = motions.get(motion_name) or Motion(name=motion_name, kind="external")
            machine.states.append(
                AnimatorState(
                    name=str(state_data.get("name", "")),
                    position=_position(state_data.get("position")),
                    motion=motion,
                    write_default_values=bool(state_data.get("write_default_values", True)),
                    speed_parameter=state_data.get("speed_parameter"),
                    time_parameter=state_data.get("time_parameter"),
                    behaviours=[
                        StateBehaviour.from_dict(b) for b in state_data.get("behaviours", []) or []
                    ],
                )
            )

        # Second pass: every state exists before transitions resolve indices
        for state, state_data in zip(machine.states, states_data):
            state.transitions = [
                AnimatorTransition.from_dict(t, state, machine.states)
                for t in state_data.get("transitions", []) or []
            ]
        machine.any_state_transitions = [
            AnimatorTransition.from_dict(t, Marker.ANY_STATE, machine.states)
            for t in data.get("any_state_transitions", []) or []
        ]
        machine.entry_transitions = [
            AnimatorTransition.from_dict(t, Marker.ENTRY, machine.states)
            for t in data.get("entry_transitions", []) or []
        ]
        machine.state_machines = [
            cls.from_dict(child, motions) for child in data.get("state_machines", []) or []
        ]
        return machine


def _position(value: Any) -> Position:
    if not value:
        return (0.0, 0.0)
    try:
        x, y = value
        return (float(x), float(y))
    except (TypeError, ValueError) as e:
        raise AssetFormatError(f"Bad position: {value!r}") from e


@dataclass(eq=False)
class AnimatorLayer:
    """A named, weighted layer owning one root state machine."""

    name: str
    state_machine: StateMachine
    default_weight: float = 0.0
    avatar_mask: AvatarMask | None = None


@dataclass(eq=False)
class AnimatorController:
    """Ordered parameters and layers of one controller asset."""

    name: str
    parameters: list[ControllerParameter] = field(default_factory=list)
    layers: list[AnimatorLayer] = field(default_factory=list)

    def find_parameter(self, name: str) -> ControllerParameter | None:
        for param in self.parameters:
            if param.name == name:
                return param
        return None

    def add_parameter(self, name: str, kind: ParameterKind) -> ControllerParameter:
        param = ControllerParameter(name=name, kind=kind)
        self.parameters.append(param)
        return param

    def find_layer_index(self, name: str) -> int:
        """Index of the first layer with this name, -1 when absent."""
        for index, layer in enumerate(self.layers):
            if layer.name == name:
                return index
        return -1

    def get_layer(self, name: str) -> AnimatorLayer | None:
        index = self.find_layer_index(name)
        return self.layers[index] if index != -1 else None

    def make_unique_layer_name(self, name: str) -> str:
        """Return name, or name with the first free numeric suffix."""
        existing = {layer.name for layer in self.layers}
        if name not in existing:
            return name
        counter = 1
        while f"{name} {counter}" in existing:
            counter += 1
        return f"{name} {counter}"

    def add_layer(self, name: str) -> AnimatorLayer:
        layer = AnimatorLayer(name=name, state_machine=StateMachine(name=name))
        self.layers.append(layer)
        return layer

    def remove_layer(self, index: int) -> AnimatorLayer:
        return self.layers.pop(index)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "parameters": [p.to_dict() for p in self.parameters],
            "layers": [
                {
                    "name": layer.name,
                    "default_weight": layer.default_weight,
                    "avatar_mask": layer.avatar_mask.name if layer.avatar_mask else None,
                    "state_machine": layer.state_machine.to_dict(),
                }
                for layer in self.layers
            ],
        }

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        resources: dict[str, SubResource] | None = None,
    ) -> AnimatorController:
        """Create a controller; motions and masks are resolved by name."""
        resources = resources or {}
        motions = {name: r for name, r in resources.items() if isinstance(r, Motion)}

        controller = cls(
            name=str(data.get("name", "")),
            parameters=[ControllerParameter.from_dict(p) for p in data.get("parameters", []) or []],
        )
        for layer_data in data.get("layers", []) or []:
            mask_name = layer_data.get("avatar_mask")
            mask = resources.get(mask_name) if mask_name else None
            if mask_name and not isinstance(mask, AvatarMask):
                mask = AvatarMask(name=mask_name)
            controller.layers.append(
                AnimatorLayer(
                    name=str(layer_data.get("name", "")),
                    state_machine=StateMachine.from_dict(
                        layer_data.get("state_machine") or {}, motions
                    ),
                    default_weight=float(layer_data.get("default_weight", 0.0)),
                    avatar_mask=mask,
                )
            )
        return controller
