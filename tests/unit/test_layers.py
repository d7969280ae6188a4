"""Tests for layer creation, rebuild and removal."""

from pathlib import Path

import pytest

from animator_graph.assets.container import AssetContainer
from animator_graph.builder.base import AnimatorAsCode
from animator_graph.controller.models import AvatarMask, StateMachine
from animator_graph.errors import StructuralViolation


def _build_wave_layer(aac: AnimatorAsCode, name: str = "Wave"):
    layer = aac.create_layer(name)
    idle = layer.new_state("Idle")
    wave = layer.new_state("Wave")
    waving = layer.bool_parameter("Waving")
    idle.transitions_to(wave).when(waving.is_true())
    wave.transitions_to(idle).when(waving.is_false())
    return layer


class TestLayerCreation:
    """Tests for new layers."""

    def test_creates_layer_with_anchors(self, aac: AnimatorAsCode) -> None:
        """Should append the layer and place the markers on the grid."""
        layer = aac.create_layer("Base")

        assert [entry.name for entry in aac.controller.layers] == ["Base"]
        machine = layer.layer.state_machine
        assert machine.any_state_position == (0.0, 490.0)
        assert machine.entry_position == (0.0, -70.0)
        assert machine.exit_position == (1750.0, -70.0)
        assert machine.record_undo is False

    def test_weight_defaults_to_config(self, aac: AnimatorAsCode) -> None:
        """Should use the configured weight unless one is given."""
        first = aac.create_layer("First")
        second = aac.create_layer("Second", weight=0.25)

        assert first.layer.default_weight == 1.0
        assert second.layer.default_weight == 0.25

    def test_main_and_supporting_names(self, aac: AnimatorAsCode) -> None:
        """Should derive layer names from the system name."""
        main = aac.create_main_layer()
        hands = aac.create_supporting_layer("Hands")

        assert main.name == "Test"
        assert hands.name == "Test__Hands"

    def test_first_layer_requires_a_layer(self, aac: AnimatorAsCode) -> None:
        """Should refuse to rebuild the first layer of an empty controller."""
        with pytest.raises(StructuralViolation):
            aac.create_first_layer()

    def test_first_layer_rebuilds_index_zero(self, aac: AnimatorAsCode) -> None:
        """Should rebuild whatever layer sits at index zero."""
        _build_wave_layer(aac, "Base")
        aac.create_layer("Other")

        layer = aac.create_first_layer()

        assert layer.name == "Base"
        assert aac.controller.layers[0].state_machine.is_empty


class TestLayerRebuild:
    """Tests for idempotent rebuild of existing layers."""

    def test_rebuild_keeps_index_and_identity(self, aac: AnimatorAsCode) -> None:
        """Should empty the layer in place without moving it."""
        _build_wave_layer(aac, "Before")
        first = _build_wave_layer(aac, "Wave")
        aac.create_layer("After")
        layer_object = first.layer
        machine = layer_object.state_machine

        rebuilt = aac.create_layer("Wave")

        assert [entry.name for entry in aac.controller.layers] == ["Before", "Wave", "After"]
        assert rebuilt.layer is layer_object
        assert rebuilt.layer.state_machine is machine
        assert machine.states == []
        assert machine.all_transitions() == []

    def test_rebuild_twice_yields_same_structure(self, aac: AnimatorAsCode) -> None:
        """Should leave one layer with only the latest states."""
        _build_wave_layer(aac)
        _build_wave_layer(aac)

        assert len(aac.controller.layers) == 1
        machine = aac.controller.layers[0].state_machine
        assert [s.name for s in machine.states] == ["Idle", "Wave"]
        assert len(machine.all_transitions()) == 2
        assert [p.name for p in aac.controller.parameters] == ["Waving"]

    def test_rebuild_resets_weight_and_mask(self, aac: AnimatorAsCode) -> None:
        """Should apply the requested weight and mask on every pass."""
        mask = AvatarMask(name="Hands")
        aac.create_layer("Wave", weight=0.5, mask=mask)

        rebuilt = aac.create_layer("Wave")

        assert rebuilt.layer.default_weight == 1.0
        assert rebuilt.layer.avatar_mask is None

    def test_rebuild_clears_nested_machines(self, aac: AnimatorAsCode) -> None:
        """Should drop nested sub-graphs of the rebuilt layer."""
        layer = aac.create_layer("Wave")
        layer.layer.state_machine.state_machines.append(StateMachine(name="Nested"))

        rebuilt = aac.create_layer("Wave")

        assert rebuilt.layer.state_machine.state_machines == []

    def test_rebuild_keeps_markers(self, aac: AnimatorAsCode) -> None:
        """Should put the markers back on their anchors."""
        layer = aac.create_layer("Wave")
        machine = layer.layer.state_machine
        machine.entry_position = (999.0, 999.0)

        aac.create_layer("Wave")

        assert machine.entry_position == (0.0, -70.0)

    def test_empty_motion_per_pass(self, aac: AnimatorAsCode) -> None:
        """Should give each pass its own empty motion."""
        first = aac.create_layer("Wave").new_state("A").state.motion
        second = aac.create_layer("Wave").new_state("A").state.motion

        assert first is not second
        assert first.name != second.name


class TestLayerRemoval:
    """Tests for removing layers by name."""

    def test_remove_existing_layer(self, aac: AnimatorAsCode) -> None:
        """Should remove the layer and report it."""
        aac.create_layer("A")
        aac.create_layer("B")

        assert aac.remove_layer("A") is True
        assert [entry.name for entry in aac.controller.layers] == ["B"]

    def test_remove_missing_layer_is_noop(self, aac: AnimatorAsCode) -> None:
        """Should silently ignore unknown layer names."""
        aac.create_layer("A")

        assert aac.remove_layer("Missing") is False
        assert [entry.name for entry in aac.controller.layers] == ["A"]

    def test_builder_detached_after_removal(self, aac: AnimatorAsCode) -> None:
        """Should report a layer builder whose layer was removed."""
        layer = aac.create_layer("A")
        aac.remove_layer("A")

        with pytest.raises(LookupError):
            layer.layer


class TestAvatarMasks:
    """Tests for generated layer masks."""

    def test_resolve_mask_from_paths(self, aac: AnimatorAsCode) -> None:
        """Should enable exactly the given paths and register the mask."""
        layer = aac.create_layer("Hands").resolve_avatar_mask(["Armature/Hand.L", "Armature/Hand.R"])

        mask = layer.layer.avatar_mask
        assert mask.name == "zAutogenerated__test__Hands__AvatarMask_2"
        assert mask.transforms == [("Armature/Hand.L", True), ("Armature/Hand.R", True)]
        assert mask.humanoid_body_parts_active is False
        assert any(r is mask for r in aac.container.sub_resources)

    def test_mask_without_transforms(self, aac: AnimatorAsCode) -> None:
        """Should disable every transform through a placeholder entry."""
        layer = aac.create_layer("Face").with_avatar_mask_no_transforms()

        assert layer.layer.avatar_mask.transforms == [("_ignored", False)]

    def test_repeated_masks_get_distinct_names(self, aac: AnimatorAsCode, tmp_path: Path) -> None:
        """Should name each generated mask uniquely so reloading resolves it."""
        layer = aac.create_layer("Hands").resolve_avatar_mask(["Hand.L"])
        first = layer.layer.avatar_mask
        aac.create_layer("Hands").resolve_avatar_mask(["Hand.R"])
        second = layer.layer.avatar_mask

        assert first.name != second.name

        loaded = AssetContainer.load(aac.container.save(tmp_path / "asset.yaml"))
        mask = loaded.controller.layers[0].avatar_mask
        assert mask is loaded.get_sub_resource(second.name)
        assert mask.transforms == [("Hand.R", True)]

    def test_unique_name_for_duplicate_layers(self, aac: AnimatorAsCode) -> None:
        """Should suffix a layer name already taken by an unrelated layer."""
        aac.controller.add_layer("Wave")

        assert aac.controller.make_unique_layer_name("Wave") == "Wave 1"
