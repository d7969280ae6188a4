"""
Defaults provider - values applied to freshly created graph nodes.
"""

from __future__ import annotations

from animator_graph.config import AnimatorConfig
from animator_graph.controller.models import (
    AnimatorState,
    AnimatorTransition,
    InterruptionSource,
    Motion,
)


class DefaultsProvider:
    """Derives state/transition defaults and layer names from the config."""

    def __init__(self, config: AnimatorConfig | None = None) -> None:
        self.config = config or AnimatorConfig()

    def grid(self) -> tuple[float, float]:
        return (self.config.grid.x, self.config.grid.y)

    def configure_state(self, state: AnimatorState, empty_motion: Motion | None) -> None:
        state.motion = empty_motion
        state.write_default_values = self.config.state_defaults.write_default_values

    def configure_transition(self, transition: AnimatorTransition) -> None:
        defaults = self.config.transition_defaults
        transition.duration = defaults.duration
        transition.has_exit_time = defaults.has_exit_time
        transition.exit_time = defaults.exit_time
        transition.has_fixed_duration = defaults.has_fixed_duration
        transition.offset = defaults.offset
        transition.interruption_source = InterruptionSource(defaults.interruption_source)
        transition.can_transition_to_self = defaults.can_transition_to_self
        transition.ordered_interruption = defaults.ordered_interruption

    def convert_layer_name(self, system_name: str) -> str:
        return system_name

    def convert_layer_name_with_suffix(self, system_name: str, suffix: str) -> str:
        return f"{system_name}__{suffix}"
