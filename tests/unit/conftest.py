"""Shared fixtures for builder tests."""

import pytest

from animator_graph.builder.base import AnimatorAsCode
from animator_graph.builder.layers import LayerBuilder
from animator_graph.config import AnimatorConfig


@pytest.fixture
def config() -> AnimatorConfig:
    """Default config for tests."""
    return AnimatorConfig(system_name="Test", asset_key="test")


@pytest.fixture
def aac(config: AnimatorConfig) -> AnimatorAsCode:
    """Builder over a fresh in-memory container."""
    return AnimatorAsCode(config)


@pytest.fixture
def layer(aac: AnimatorAsCode) -> LayerBuilder:
    """The main layer of a fresh controller."""
    return aac.create_main_layer()
