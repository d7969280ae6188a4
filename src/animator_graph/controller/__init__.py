"""In-memory animator controller model."""

from .models import (
    AnimatorController,
    AnimatorLayer,
    AnimatorState,
    AnimatorTransition,
    AvatarMask,
    Condition,
    ConditionMode,
    ControllerParameter,
    InterruptionSource,
    Marker,
    Motion,
    ParameterKind,
    StateBehaviour,
    StateMachine,
)

__all__ = [
    "AnimatorController",
    "AnimatorLayer",
    "AnimatorState",
    "AnimatorTransition",
    "AvatarMask",
    "Condition",
    "ConditionMode",
    "ControllerParameter",
    "InterruptionSource",
    "Marker",
    "Motion",
    "ParameterKind",
    "StateBehaviour",
    "StateMachine",
]
