"""
Transition handles returned by the graph builder.

Settings changed here are copied verbatim onto every sibling later forked by
`or_()`, so configure timing before starting the condition chain.
"""

from __future__ import annotations

from animator_graph.builder.conditions import NewTransitionContinuation
from animator_graph.controller.models import (
    AnimatorTransition,
    InterruptionSource,
    StateMachine,
)


class TransitionBuilder(NewTransitionContinuation):
    """A state, any-state or exit transition with timing setters."""

    def __init__(self, transition: AnimatorTransition, machine: StateMachine) -> None:
        super().__init__(transition, machine)
        self.transition.record_undo = False

    def with_source_interruption(self) -> TransitionBuilder:
        self.transition.interruption_source = InterruptionSource.SOURCE
        return self

    def with_interruption(self, source: InterruptionSource) -> TransitionBuilder:
        self.transition.interruption_source = source
        return self

    def with_transition_duration_seconds(self, seconds: float) -> TransitionBuilder:
        self.transition.duration = seconds
        return self

    def with_transition_duration_percent(self, normalized: float) -> TransitionBuilder:
        self.transition.has_fixed_duration = False
        self.transition.duration = normalized
        return self

    def with_ordered_interruption(self) -> TransitionBuilder:
        self.transition.ordered_interruption = True
        return self

    def with_no_ordered_interruption(self) -> TransitionBuilder:
        self.transition.ordered_interruption = False
        return self

    def with_transition_to_self(self) -> TransitionBuilder:
        self.transition.can_transition_to_self = True
        return self

    def with_no_transition_to_self(self) -> TransitionBuilder:
        self.transition.can_transition_to_self = False
        return self

    def after_animation_finishes(self) -> TransitionBuilder:
        self.transition.has_exit_time = True
        self.transition.exit_time = 1.0
        return self

    def after_animation_is_at_least_at_percent(self, exit_time_normalized: float) -> TransitionBuilder:
        self.transition.has_exit_time = True
        self.transition.exit_time = exit_time_normalized
        return self


class EntryTransitionBuilder(NewTransitionContinuation):
    """Entry transitions only carry conditions."""

    def __init__(self, transition: AnimatorTransition, machine: StateMachine) -> None:
        super().__init__(transition, machine)
        self.transition.record_undo = False
