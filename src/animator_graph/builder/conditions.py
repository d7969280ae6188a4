"""
Condition Algebra - fluent AND/OR guard construction on transitions.

A single transition only AND-s its conditions. OR is realised by forking
sibling transitions that share source, destination and settings, each
carrying its own AND-conjunction.

The chain is encoded in distinct continuation types, each exposing only the
calls that are legal at its position:

    NewTransitionContinuation     when / when_all / when_any / when_conditions
    TransitionContinuation        and_ / and_all / or_
    MultiTransitionContinuation   and_ / and_all (broadcast to every branch) / or_
    TransitionContinuationOnlyOr  or_
    TransitionContinuationWithoutOr  and_ / and_whenever (no OR reachable)

Every call mutates the underlying transitions immediately.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, Union

from animator_graph.controller.models import (
    AnimatorTransition,
    ConditionMode,
    Marker,
    StateMachine,
)
from animator_graph.errors import StructuralViolation


class ConditionAppender:
    """Appends raw conditions to one transition."""

    def __init__(self, transition: AnimatorTransition) -> None:
        self._transition = transition
        self._transition.record_undo = False

    def add(self, parameter: str, mode: ConditionMode, threshold: float = 0.0) -> ConditionAppender:
        self._transition.add_condition(mode, threshold, parameter)
        return self


class TransitionCondition(ABC):
    """A condition (or AND-group) applied to a single transition."""

    @abstractmethod
    def apply_to(self, appender: ConditionAppender) -> None:
        pass


class OrTransitionCondition(ABC):
    """A condition group that forks one sibling transition per disjunct."""

    @abstractmethod
    def apply_to_continuation(
        self, first: NewTransitionContinuation
    ) -> list[TransitionContinuation]:
        """
        Apply the first disjunct to `first` and fork a sibling per remaining one.

        Returns one continuation per disjunct, in order.
        """
        pass


AnyCondition = Union[TransitionCondition, OrTransitionCondition]


class ParameterCondition(TransitionCondition):
    """One (parameter, mode, threshold) clause."""

    def __init__(self, parameter: str, mode: ConditionMode, threshold: float = 0.0) -> None:
        self.parameter = parameter
        self.mode = mode
        self.threshold = float(threshold)

    def apply_to(self, appender: ConditionAppender) -> None:
        appender.add(self.parameter, self.mode, self.threshold)

    def __repr__(self) -> str:
        return f"ParameterCondition({self.parameter!r}, {self.mode.value}, {self.threshold})"


class AllOf(TransitionCondition):
    """Conjunction of conditions on the same transition."""

    def __init__(self, conditions: Iterable[TransitionCondition]) -> None:
        self.conditions = list(conditions)
        for condition in self.conditions:
            _require_and_only(condition)

    def apply_to(self, appender: ConditionAppender) -> None:
        for condition in self.conditions:
            condition.apply_to(appender)


class AnyOf(OrTransitionCondition):
    """Disjunction: the destination is reached when any member holds."""

    def __init__(self, conditions: Iterable[TransitionCondition]) -> None:
        self.conditions = list(conditions)
        if not self.conditions:
            raise StructuralViolation("An OR-group needs at least one disjunct")
        for condition in self.conditions:
            _require_and_only(condition)

    def apply_to_continuation(
        self, first: NewTransitionContinuation
    ) -> list[TransitionContinuation]:
        pending: list[TransitionContinuation] = []
        current = first
        for index, condition in enumerate(self.conditions):
            continuation = current.when(condition)
            pending.append(continuation)
            if index < len(self.conditions) - 1:
                current = continuation.or_()
        return pending


def _require_and_only(condition: Any) -> None:
    if isinstance(condition, OrTransitionCondition):
        raise StructuralViolation(
            "An OR-group cannot be used where only AND conditions are accepted"
        )
    if not isinstance(condition, TransitionCondition):
        raise TypeError(f"Expected a transition condition, got {type(condition).__name__}")


class NewTransitionContinuation:
    """A transition that has no conditions added through the chain yet."""

    def __init__(self, transition: AnimatorTransition, machine: StateMachine) -> None:
        self.transition = transition
        self._machine = machine

    def when(self, condition: AnyCondition) -> TransitionContinuation | MultiTransitionContinuation:
        """
        Add a condition. An OR-group forks siblings and returns a continuation
        that broadcasts later AND calls to every branch.
        """
        if isinstance(condition, OrTransitionCondition):
            pending = condition.apply_to_continuation(self)
            return MultiTransitionContinuation(self.transition, self._machine, pending)

        _require_and_only(condition)
        condition.apply_to(ConditionAppender(self.transition))
        return self._as_continuation_with_or()

    def when_all(
        self, actions: Callable[[TransitionContinuationWithoutOr], Any]
    ) -> TransitionContinuation:
        """Build an AND-only group inside the callback."""
        actions(TransitionContinuationWithoutOr(self.transition))
        return self._as_continuation_with_or()

    def when_any(
        self, actions: Callable[[NewTransitionContinuation], Any]
    ) -> TransitionContinuationOnlyOr:
        """Hand this builder to the callback, which may fork siblings itself."""
        actions(self)
        return TransitionContinuationOnlyOr(self.transition, self._machine)

    def when_conditions(self) -> TransitionContinuation:
        return self._as_continuation_with_or()

    def _as_continuation_with_or(self) -> TransitionContinuation:
        return TransitionContinuation(self.transition, self._machine)


class _ContinuationWithOr:
    """Shared OR support: fork a sibling of the template transition."""

    def __init__(self, transition: AnimatorTransition, machine: StateMachine) -> None:
        self.transition = transition
        self._machine = machine

    def or_(self) -> NewTransitionContinuation:
        return NewTransitionContinuation(self._new_transition_from_template(), self._machine)

    def _new_transition_from_template(self) -> AnimatorTransition:
        template = self.transition
        source = template.source
        destination = template.destination

        if source is Marker.ENTRY:
            sibling = self._machine.add_entry_transition(destination)
        elif source is Marker.ANY_STATE:
            sibling = self._machine.add_any_state_transition(destination)
        elif destination is Marker.EXIT:
            sibling = source.add_exit_transition()
        else:
            sibling = source.add_transition(destination)

        sibling.copy_settings_from(template)
        sibling.record_undo = False
        return sibling


class TransitionContinuation(_ContinuationWithOr):
    """A transition with conditions; more may be AND-ed, or a sibling forked."""

    def and_(self, condition: TransitionCondition) -> TransitionContinuation:
        _require_and_only(condition)
        condition.apply_to(ConditionAppender(self.transition))
        return self

    def and_all(
        self, actions: Callable[[TransitionContinuationWithoutOr], Any]
    ) -> TransitionContinuation:
        actions(TransitionContinuationWithoutOr(self.transition))
        return self


class MultiTransitionContinuation(_ContinuationWithOr):
    """
    Result of applying an OR-group: one continuation per sibling.

    AND calls loop over every tracked sibling so a condition added after the
    group applies to all of its branches.
    """

    def __init__(
        self,
        transition: AnimatorTransition,
        machine: StateMachine,
        pending: list[TransitionContinuation],
    ) -> None:
        super().__init__(transition, machine)
        self._pending = list(pending)

    @property
    def transitions(self) -> list[AnimatorTransition]:
        return [continuation.transition for continuation in self._pending]

    def and_(self, condition: TransitionCondition) -> MultiTransitionContinuation:
        _require_and_only(condition)
        for continuation in self._pending:
            continuation.and_(condition)
        return self

    def and_all(
        self, actions: Callable[[TransitionContinuationWithoutOr], Any]
    ) -> MultiTransitionContinuation:
        for continuation in self._pending:
            continuation.and_all(actions)
        return self


class TransitionContinuationOnlyOr(_ContinuationWithOr):
    """After `when_any` only a new sibling may be started."""

    pass


class TransitionContinuationWithoutOr:
    """AND-only view of one transition, used inside `when_all` callbacks."""

    def __init__(self, transition: AnimatorTransition) -> None:
        self._transition = transition

    def and_(self, condition: TransitionCondition) -> TransitionContinuationWithoutOr:
        _require_and_only(condition)
        condition.apply_to(ConditionAppender(self._transition))
        return self

    def and_whenever(
        self, actions: Callable[[TransitionContinuationWithoutOr], Any]
    ) -> TransitionContinuationWithoutOr:
        actions(self)
        return self
