"""Tests for the asset container."""

from pathlib import Path

import pytest

from animator_graph.assets.container import AssetContainer, count_by_type
from animator_graph.builder.base import AnimatorAsCode, TimeUnit
from animator_graph.controller.models import ConditionMode, Marker, Motion
from animator_graph.errors import AssetFormatError


@pytest.fixture
def built(aac: AnimatorAsCode) -> AnimatorAsCode:
    """A controller with one layer using every kind of transition."""
    layer = aac.create_main_layer().resolve_avatar_mask(["Body"])
    idle = layer.new_state("Idle")
    wave = layer.new_state("Wave").under(idle)
    waving = layer.bool_parameter("Waving")
    gesture = layer.int_parameter("Gesture")

    layer.entry_transitions_to(idle)
    idle.transitions_to(wave).with_transition_duration_seconds(0.1).when(
        waving.is_true()
    ).or_().when(gesture.is_equal_to(2))
    wave.exits().when(waving.is_false())
    layer.any_transitions_to(idle).when(gesture.is_equal_to(0))
    wave.drives(waving, False)
    return aac


class TestNaming:
    """Tests for generated names."""

    def test_unique_names_never_repeat(self) -> None:
        """Should hand out a new name every call."""
        container = AssetContainer(asset_key="k")

        names = {container.unique_name("clip") for _ in range(5)}

        assert len(names) == 5

    def test_generated_name_format(self) -> None:
        """Should prefix with the asset key."""
        container = AssetContainer(asset_key="k")

        assert container.generated_name("Mask") == "zAutogenerated__k__Mask_1"
        assert container.generated_name("Mask", prefix="AAC") == "AAC__k__Mask_2"


class TestSubResources:
    """Tests for sub-resource registration and sweeping."""

    def test_register_is_idempotent(self) -> None:
        """Should register a resource object only once."""
        container = AssetContainer()
        clip = Motion(name="clip")

        container.register_sub_resource(clip)
        container.register_sub_resource(clip)

        assert container.sub_resources == [clip]
        assert container.get_sub_resource("clip") is clip

    def test_clear_previous_assets(self, built: AnimatorAsCode) -> None:
        """Should drop every generated resource."""
        removed = built.clear_previous_assets()

        assert removed
        assert built.container.sub_resources == []

    def test_sweep_keeps_referenced(self, aac: AnimatorAsCode) -> None:
        """Should keep only resources that some layer or state uses."""
        aac.create_layer("Wave").new_state("A")
        layer = aac.create_layer("Wave").resolve_avatar_mask(["Body"])
        state = layer.new_state("A")
        aac.dummy_clip_lasting(2, TimeUnit.SECONDS)

        removed = aac.sweep_orphaned_sub_resources()

        assert len(removed) == 2
        kept = aac.container.sub_resources
        assert len(kept) == 2
        assert any(r is state.state.motion for r in kept)
        assert any(r is layer.layer.avatar_mask for r in kept)

    def test_count_by_type(self, built: AnimatorAsCode) -> None:
        """Should count resources per kind."""
        built.new_blend_tree_as_raw()

        counts = count_by_type(built.container.sub_resources)

        assert counts == {"clip": 1, "avatar_mask": 1, "blend_tree": 1}


class TestPersistence:
    """Tests for YAML save/load."""

    def test_round_trip_preserves_graph(self, built: AnimatorAsCode, tmp_path: Path) -> None:
        """Should restore layers, states and transition endpoints."""
        path = built.container.save(tmp_path / "controller.yaml")

        loaded = AssetContainer.load(path)

        assert loaded.asset_key == "test"
        layer = loaded.controller.layers[0]
        assert layer.name == "Test"
        assert layer.avatar_mask is loaded.get_sub_resource(layer.avatar_mask.name)

        machine = layer.state_machine
        idle, wave = machine.states
        assert (idle.name, wave.name) == ("Idle", "Wave")
        assert wave.position == (0.0, 70.0)
        assert idle.motion is loaded.get_sub_resource(idle.motion.name)

        between = machine.transitions_between(idle, wave)
        assert len(between) == 2
        assert all(t.duration == 0.1 for t in between)
        assert between[1].conditions[0].mode == ConditionMode.EQUALS
        assert machine.transitions_between(wave, Marker.EXIT)[0].conditions[0].parameter == "Waving"
        assert machine.entry_transitions[0].destination is idle
        assert machine.any_state_transitions[0].destination is idle
        assert wave.behaviours[0].fields["parameters"][0]["value"] == 0

    def test_names_stay_unique_after_reload(self, built: AnimatorAsCode, tmp_path: Path) -> None:
        """Should continue the name counter from the saved document."""
        path = built.container.save(tmp_path / "controller.yaml")
        existing = {r.name for r in built.container.sub_resources}

        loaded = AssetContainer.load(path)
        name = loaded.generated_name("D(1 frames)", prefix="AAC")

        assert name not in existing

    def test_load_or_create_missing(self, tmp_path: Path) -> None:
        """Should return an empty container for a missing file."""
        container = AssetContainer.load_or_create(tmp_path / "new.yaml", asset_key="fresh")

        assert container.asset_key == "fresh"
        assert container.controller.layers == []

    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        """Should raise AssetFormatError for undecodable files."""
        path = tmp_path / "broken.yaml"
        path.write_text("controller: [unclosed\n")

        with pytest.raises(AssetFormatError):
            AssetContainer.load(path)

    def test_missing_controller_raises(self, tmp_path: Path) -> None:
        """Should raise AssetFormatError when the controller section is absent."""
        path = tmp_path / "empty.yaml"
        path.write_text("asset_key: x\n")

        with pytest.raises(AssetFormatError):
            AssetContainer.load(path)
