"""
Parameter Registry - typed handles over controller parameters.

Requesting a parameter declares it on the controller the first time and is a
no-op afterwards. Handles are value objects: two requests for the same name
return equal handles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Generic, Iterable, Iterator, TypeVar, Union

import structlog

from animator_graph.builder.conditions import (
    AllOf,
    AnyOf,
    ParameterCondition,
)
from animator_graph.controller.models import (
    AnimatorController,
    ConditionMode,
    ParameterKind,
)
from animator_graph.errors import ParameterKindConflict

logger = structlog.get_logger()


@dataclass(frozen=True)
class ParameterHandle:
    """Reference to a declared parameter by name."""

    name: str

    kind: ClassVar[ParameterKind]


@dataclass(frozen=True)
class BoolParameter(ParameterHandle):
    """Bool parameter, also used for triggers read as bools."""

    kind: ClassVar[ParameterKind] = ParameterKind.BOOL

    def is_true(self) -> ParameterCondition:
        return ParameterCondition(self.name, ConditionMode.IF)

    def is_false(self) -> ParameterCondition:
        return ParameterCondition(self.name, ConditionMode.IF_NOT)

    def is_equal_to(self, value: bool) -> ParameterCondition:
        return self.is_true() if value else self.is_false()


@dataclass(frozen=True)
class FloatParameter(ParameterHandle):
    kind: ClassVar[ParameterKind] = ParameterKind.FLOAT

    def is_greater_than(self, other: float) -> ParameterCondition:
        return ParameterCondition(self.name, ConditionMode.GREATER, other)

    def is_less_than(self, other: float) -> ParameterCondition:
        return ParameterCondition(self.name, ConditionMode.LESS, other)


@dataclass(frozen=True)
class IntParameter(ParameterHandle):
    kind: ClassVar[ParameterKind] = ParameterKind.INT

    def is_greater_than(self, other: int) -> ParameterCondition:
        return ParameterCondition(self.name, ConditionMode.GREATER, other)

    def is_less_than(self, other: int) -> ParameterCondition:
        return ParameterCondition(self.name, ConditionMode.LESS, other)

    def is_equal_to(self, other: int) -> ParameterCondition:
        return ParameterCondition(self.name, ConditionMode.EQUALS, other)

    def is_not_equal_to(self, other: int) -> ParameterCondition:
        return ParameterCondition(self.name, ConditionMode.NOT_EQUAL, other)


@dataclass(frozen=True)
class EnumIntParameter(IntParameter):
    """Int parameter whose values are members of one Enum type."""

    enum_type: type[Enum] = field(default=Enum, compare=False)

    def _value_of(self, member: Enum) -> int:
        if not isinstance(member, self.enum_type):
            raise TypeError(
                f"Parameter '{self.name}' accepts {self.enum_type.__name__} members, "
                f"got {member!r}"
            )
        return int(member.value)

    def is_equal_to(self, other: Enum) -> ParameterCondition:  # type: ignore[override]
        return super().is_equal_to(self._value_of(other))

    def is_not_equal_to(self, other: Enum) -> ParameterCondition:  # type: ignore[override]
        return super().is_not_equal_to(self._value_of(other))


P = TypeVar("P", bound=ParameterHandle)


class ParameterGroup(Generic[P]):
    """Ordered collection of handles for batch conditions and side effects."""

    def __init__(self, parameters: Iterable[P]) -> None:
        self._parameters: tuple[P, ...] = tuple(parameters)

    def __iter__(self) -> Iterator[P]:
        return iter(self._parameters)

    def __len__(self) -> int:
        return len(self._parameters)

    def __getitem__(self, index: int) -> P:
        return self._parameters[index]

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ParameterGroup) and self._parameters == other._parameters

    def __hash__(self) -> int:
        return hash(self._parameters)

    @property
    def names(self) -> list[str]:
        return [p.name for p in self._parameters]

    def to_list(self) -> list[P]:
        return list(self._parameters)


class BoolParameterGroup(ParameterGroup[BoolParameter]):
    def are_true(self) -> AllOf:
        return AllOf(p.is_true() for p in self)

    def are_false(self) -> AllOf:
        return AllOf(p.is_false() for p in self)

    def is_any_true(self) -> AnyOf:
        return AnyOf(p.is_true() for p in self)

    def is_any_false(self) -> AnyOf:
        return AnyOf(p.is_false() for p in self)

    def are_false_except(self, *exceptions: BoolParameter | BoolParameterGroup) -> AllOf:
        """Every member false, except the given ones which must be true."""
        excepted = _names_of(exceptions)
        return AllOf(p.is_true() if p.name in excepted else p.is_false() for p in self)

    def are_true_except(self, *exceptions: BoolParameter | BoolParameterGroup) -> AllOf:
        """Every member true, except the given ones which must be false."""
        excepted = _names_of(exceptions)
        return AllOf(p.is_false() if p.name in excepted else p.is_true() for p in self)


class IntParameterGroup(ParameterGroup[IntParameter]):
    def are_equal_to(self, value: int) -> AllOf:
        return AllOf(p.is_equal_to(value) for p in self)

    def is_any_equal_to(self, value: int) -> AnyOf:
        return AnyOf(p.is_equal_to(value) for p in self)


class FloatParameterGroup(ParameterGroup[FloatParameter]):
    def are_greater_than(self, value: float) -> AllOf:
        return AllOf(p.is_greater_than(value) for p in self)

    def are_less_than(self, value: float) -> AllOf:
        return AllOf(p.is_less_than(value) for p in self)


def _names_of(items: Iterable[ParameterHandle | ParameterGroup]) -> set[str]:
    names: set[str] = set()
    for item in items:
        if isinstance(item, ParameterGroup):
            names.update(item.names)
        else:
            names.add(item.name)
    return names


NameOrHandle = Union[str, ParameterHandle]


class ParameterRegistry:
    """
    Creates parameters on the controller as they are first requested.

    A name keeps the kind it was first declared with; asking for it with
    another kind raises ParameterKindConflict before anything is changed.
    """

    def __init__(self, controller: AnimatorController) -> None:
        self.controller = controller

    # ===== Single parameters =====

    def bool_parameter(self, name: str) -> BoolParameter:
        self._declare([name], ParameterKind.BOOL)
        return BoolParameter(name)

    def trigger_parameter_as_bool(self, name: str) -> BoolParameter:
        self._declare([name], ParameterKind.TRIGGER)
        return BoolParameter(name)

    def float_parameter(self, name: str) -> FloatParameter:
        self._declare([name], ParameterKind.FLOAT)
        return FloatParameter(name)

    def int_parameter(self, name: str) -> IntParameter:
        self._declare([name], ParameterKind.INT)
        return IntParameter(name)

    def enum_parameter(self, name: str, enum_type: type[Enum]) -> EnumIntParameter:
        self._declare([name], ParameterKind.INT)
        return EnumIntParameter(name, enum_type=enum_type)

    # ===== Groups =====

    def bool_parameters(self, *names: NameOrHandle) -> BoolParameterGroup:
        resolved = _resolve_names(names)
        self._declare(resolved, ParameterKind.BOOL)
        return BoolParameterGroup(BoolParameter(n) for n in resolved)

    def trigger_parameters_as_bools(self, *names: NameOrHandle) -> BoolParameterGroup:
        resolved = _resolve_names(names)
        self._declare(resolved, ParameterKind.TRIGGER)
        return BoolParameterGroup(BoolParameter(n) for n in resolved)

    def float_parameters(self, *names: NameOrHandle) -> FloatParameterGroup:
        resolved = _resolve_names(names)
        self._declare(resolved, ParameterKind.FLOAT)
        return FloatParameterGroup(FloatParameter(n) for n in resolved)

    def int_parameters(self, *names: NameOrHandle) -> IntParameterGroup:
        resolved = _resolve_names(names)
        self._declare(resolved, ParameterKind.INT)
        return IntParameterGroup(IntParameter(n) for n in resolved)

    # ===== Defaults =====

    def override_value(self, parameter: ParameterHandle, value: bool | int | float) -> None:
        """Rewrite the declared default of an existing parameter."""
        declared = self.controller.find_parameter(parameter.name)
        if declared is None:
            return
        if declared.kind == ParameterKind.INT:
            declared.default_int = int(value)
        elif declared.kind == ParameterKind.FLOAT:
            declared.default_float = float(value)
        else:
            declared.default_bool = bool(value)

    def _declare(self, names: list[str], kind: ParameterKind) -> None:
        # Check every name first so a conflict leaves the controller untouched
        for name in names:
            existing = self.controller.find_parameter(name)
            if existing is not None and existing.kind != kind:
                raise ParameterKindConflict(name, existing.kind.value, kind.value)

        for name in names:
            if self.controller.find_parameter(name) is None:
                self.controller.add_parameter(name, kind)
                logger.debug("Declared parameter", name=name, kind=kind.value)


def _resolve_names(items: Iterable[NameOrHandle]) -> list[str]:
    return [item if isinstance(item, str) else item.name for item in items]
