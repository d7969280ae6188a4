"""
Builder - fluent construction of layers, states, transitions and guards.

This module provides:
1. Parameter registry with typed handles and groups
2. Condition algebra (AND/OR with sibling-transition forking)
3. Per-layer graph builder with grid placement
4. Layer orchestration with in-place rebuild
"""

from .base import AnimatorAsCode, TimeUnit
from .conditions import (
    AllOf,
    AnyOf,
    MultiTransitionContinuation,
    NewTransitionContinuation,
    OrTransitionCondition,
    ParameterCondition,
    TransitionCondition,
    TransitionContinuation,
    TransitionContinuationOnlyOr,
    TransitionContinuationWithoutOr,
)
from .layers import AnimatorGenerator, LayerBuilder, LayerRemoval
from .parameters import (
    BoolParameter,
    BoolParameterGroup,
    EnumIntParameter,
    FloatParameter,
    FloatParameterGroup,
    IntParameter,
    IntParameterGroup,
    ParameterRegistry,
)
from .states import StateHandle, StateMachineBuilder, TrackingElement, TrackingType
from .transitions import EntryTransitionBuilder, TransitionBuilder

__all__ = [
    # Entry point
    "AnimatorAsCode",
    "TimeUnit",
    # Layers
    "AnimatorGenerator",
    "LayerBuilder",
    "LayerRemoval",
    # States
    "StateHandle",
    "StateMachineBuilder",
    "TrackingElement",
    "TrackingType",
    # Transitions
    "TransitionBuilder",
    "EntryTransitionBuilder",
    # Conditions
    "AllOf",
    "AnyOf",
    "ParameterCondition",
    "TransitionCondition",
    "OrTransitionCondition",
    "NewTransitionContinuation",
    "TransitionContinuation",
    "MultiTransitionContinuation",
    "TransitionContinuationOnlyOr",
    "TransitionContinuationWithoutOr",
    # Parameters
    "ParameterRegistry",
    "BoolParameter",
    "IntParameter",
    "FloatParameter",
    "EnumIntParameter",
    "BoolParameterGroup",
    "IntParameterGroup",
    "FloatParameterGroup",
]
