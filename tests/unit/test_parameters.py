"""Tests for the parameter registry."""

from enum import Enum

import pytest

from animator_graph.builder.layers import LayerBuilder
from animator_graph.builder.parameters import (
    BoolParameter,
    BoolParameterGroup,
    IntParameter,
)
from animator_graph.controller.models import ConditionMode, ParameterKind
from animator_graph.errors import ParameterKindConflict


class Gesture(Enum):
    NEUTRAL = 0
    FIST = 1
    OPEN = 2


class Other(Enum):
    FIST = 1


class TestSingleParameters:
    """Tests for single parameter requests."""

    def test_declares_parameter_once(self, layer: LayerBuilder) -> None:
        """Should create one declaration for repeated requests."""
        first = layer.bool_parameter("X")
        second = layer.bool_parameter("X")

        assert first == second
        declared = [p for p in layer.controller.parameters if p.name == "X"]
        assert len(declared) == 1
        assert declared[0].kind == ParameterKind.BOOL

    def test_type_appropriate_defaults(self, layer: LayerBuilder) -> None:
        """Should declare new parameters with zero-like defaults."""
        layer.bool_parameter("B")
        layer.int_parameter("I")
        layer.float_parameter("F")
        layer.trigger_parameter_as_bool("T")

        defaults = {p.name: (p.kind, p.default) for p in layer.controller.parameters}
        assert defaults == {
            "B": (ParameterKind.BOOL, False),
            "I": (ParameterKind.INT, 0),
            "F": (ParameterKind.FLOAT, 0.0),
            "T": (ParameterKind.TRIGGER, False),
        }

    def test_kind_conflict_raises(self, layer: LayerBuilder) -> None:
        """Should refuse to re-declare a name with another kind."""
        layer.bool_parameter("X")

        with pytest.raises(ParameterKindConflict) as exc_info:
            layer.int_parameter("X")

        assert exc_info.value.existing == "bool"
        assert exc_info.value.requested == "int"
        assert len(layer.controller.parameters) == 1
        assert layer.controller.parameters[0].kind == ParameterKind.BOOL

    def test_trigger_and_bool_are_distinct_kinds(self, layer: LayerBuilder) -> None:
        """Should treat trigger-as-bool as its own declared kind."""
        layer.trigger_parameter_as_bool("Jump")

        with pytest.raises(ParameterKindConflict):
            layer.bool_parameter("Jump")

    def test_trigger_condition_reads_as_bool(self, layer: LayerBuilder) -> None:
        """Should produce an 'if' condition for a fired trigger."""
        jump = layer.trigger_parameter_as_bool("Jump")

        condition = jump.is_true()
        assert condition.parameter == "Jump"
        assert condition.mode == ConditionMode.IF

    def test_override_value(self, layer: LayerBuilder) -> None:
        """Should rewrite the default without changing the kind."""
        speed = layer.float_parameter("Speed")
        layer.override_value(speed, 2.5)

        declared = layer.controller.find_parameter("Speed")
        assert declared is not None
        assert declared.default == 2.5
        assert declared.kind == ParameterKind.FLOAT


class TestEnumParameters:
    """Tests for enum-backed int parameters."""

    def test_declared_as_int(self, layer: LayerBuilder) -> None:
        """Should declare enum parameters as ints."""
        layer.enum_parameter("Gesture", Gesture)

        assert layer.controller.find_parameter("Gesture").kind == ParameterKind.INT

    def test_condition_uses_member_value(self, layer: LayerBuilder) -> None:
        """Should compare against the member's integer value."""
        gesture = layer.enum_parameter("Gesture", Gesture)

        condition = gesture.is_equal_to(Gesture.OPEN)
        assert condition.mode == ConditionMode.EQUALS
        assert condition.threshold == 2.0

        assert gesture.is_not_equal_to(Gesture.FIST).mode == ConditionMode.NOT_EQUAL

    def test_rejects_foreign_members(self, layer: LayerBuilder) -> None:
        """Should only accept members of the declared enum."""
        gesture = layer.enum_parameter("Gesture", Gesture)

        with pytest.raises(TypeError):
            gesture.is_equal_to(Other.FIST)
        with pytest.raises(TypeError):
            gesture.is_equal_to(1)


class TestParameterGroups:
    """Tests for grouped parameter requests."""

    def test_group_declares_each_name(self, layer: LayerBuilder) -> None:
        """Should declare every name in order and return handles."""
        group = layer.bool_parameters("A", "B", "C")

        assert isinstance(group, BoolParameterGroup)
        assert group.names == ["A", "B", "C"]
        assert [p.name for p in layer.controller.parameters] == ["A", "B", "C"]

    def test_group_accepts_handles(self, layer: LayerBuilder) -> None:
        """Should accept existing handles as well as names."""
        a = layer.bool_parameter("A")
        group = layer.bool_parameters(a, "B")

        assert group.to_list() == [BoolParameter("A"), BoolParameter("B")]
        assert len(layer.controller.parameters) == 2

    def test_group_conflict_leaves_controller_untouched(self, layer: LayerBuilder) -> None:
        """Should check every name before declaring any of them."""
        layer.int_parameter("B")

        with pytest.raises(ParameterKindConflict):
            layer.bool_parameters("A", "B")

        assert [p.name for p in layer.controller.parameters] == ["B"]

    def test_int_group(self, layer: LayerBuilder) -> None:
        """Should return int handles for int groups."""
        group = layer.int_parameters("X", "Y")

        assert list(group) == [IntParameter("X"), IntParameter("Y")]
        assert len(group) == 2
