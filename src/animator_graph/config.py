"""
Animator Configuration - Settings for generated controllers.

Loaded from a YAML config file. Missing files and missing keys fall back
to the defaults below.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from animator_graph.controller.models import InterruptionSource


@dataclass
class GridConfig:
    """Pixel size of one layout cell."""

    x: float = 250.0
    y: float = 70.0


@dataclass
class StateDefaults:
    """Values applied to every freshly created state."""

    write_default_values: bool = False


@dataclass
class TransitionDefaults:
    """Values applied to every freshly created transition."""

    duration: float = 0.0
    exit_time: float = 0.0
    has_exit_time: bool = False
    has_fixed_duration: bool = True
    offset: float = 0.0
    interruption_source: str = "none"  # none, source, destination, ...
    ordered_interruption: bool = True
    can_transition_to_self: bool = False


@dataclass
class AnimatorConfig:
    """Main builder configuration."""

    system_name: str = "Generated"
    asset_key: str = "asset"
    default_layer_weight: float = 1.0

    grid: GridConfig = field(default_factory=GridConfig)
    state_defaults: StateDefaults = field(default_factory=StateDefaults)
    transition_defaults: TransitionDefaults = field(default_factory=TransitionDefaults)

    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path) -> AnimatorConfig:
        """Load configuration from YAML file."""
        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data, config_path)

    @classmethod
    def from_dict(cls, data: dict[str, Any], config_path: Path | None = None) -> AnimatorConfig:
        """Create config from dictionary."""
        data = dict(data or {})

        def _filter_keys(src: Any, allowed: set[str]) -> dict[str, Any]:
            if not isinstance(src, dict):
                return {}
            return {k: v for k, v in src.items() if k in allowed}

        grid_kwargs = _filter_keys(data.get("grid"), {"x", "y"})
        state_kwargs = _filter_keys(data.get("state_defaults"), {"write_default_values"})
        transition_kwargs = _filter_keys(
            data.get("transition_defaults"),
            {
                "duration",
                "exit_time",
                "has_exit_time",
                "has_fixed_duration",
                "offset",
                "interruption_source",
                "ordered_interruption",
                "can_transition_to_self",
            },
        )
        if "interruption_source" in transition_kwargs:
            # Raises ValueError for unknown sources
            transition_kwargs["interruption_source"] = InterruptionSource(
                transition_kwargs["interruption_source"]
            ).value

        config = cls(
            system_name=str(data.get("system_name", "Generated")),
            asset_key=str(data.get("asset_key", "asset")),
            default_layer_weight=float(data.get("default_layer_weight", 1.0)),
            grid=GridConfig(**{k: float(v) for k, v in grid_kwargs.items()}),
            state_defaults=StateDefaults(**state_kwargs),
            transition_defaults=TransitionDefaults(**transition_kwargs),
        )

        if config_path:
            config.config_path = config_path

        return config

    def to_dict(self) -> dict[str, Any]:
        """Serialize config to dictionary."""
        return {
            "system_name": self.system_name,
            "asset_key": self.asset_key,
            "default_layer_weight": self.default_layer_weight,
            "grid": {"x": self.grid.x, "y": self.grid.y},
            "state_defaults": {
                "write_default_values": self.state_defaults.write_default_values,
            },
            "transition_defaults": {
                "duration": self.transition_defaults.duration,
                "exit_time": self.transition_defaults.exit_time,
                "has_exit_time": self.transition_defaults.has_exit_time,
                "has_fixed_duration": self.transition_defaults.has_fixed_duration,
                "offset": self.transition_defaults.offset,
                "interruption_source": self.transition_defaults.interruption_source,
                "ordered_interruption": self.transition_defaults.ordered_interruption,
                "can_transition_to_self": self.transition_defaults.can_transition_to_self,
            },
        }
