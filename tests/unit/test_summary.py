"""Tests for asset summaries."""

from animator_graph.builder.base import AnimatorAsCode
from animator_graph.controller.models import Condition, ConditionMode
from animator_graph.summary import format_condition, format_transition, summarize


class TestFormatting:
    """Tests for condition and transition labels."""

    def test_format_condition(self) -> None:
        """Should render each comparison mode compactly."""
        assert format_condition(Condition("A", ConditionMode.IF)) == "A"
        assert format_condition(Condition("A", ConditionMode.IF_NOT)) == "!A"
        assert format_condition(Condition("Speed", ConditionMode.GREATER, 0.5)) == "Speed > 0.5"
        assert format_condition(Condition("Gesture", ConditionMode.EQUALS, 2.0)) == "Gesture == 2"

    def test_format_marker_transitions(self, aac: AnimatorAsCode) -> None:
        """Should label markers and unconditional transitions."""
        layer = aac.create_layer("L")
        idle = layer.new_state("Idle")
        flag = layer.bool_parameter("Flag")
        layer.entry_transitions_to(idle)
        idle.exits().when(flag.is_false())

        machine = layer.layer.state_machine
        assert format_transition(machine.entry_transitions[0]) == "<Entry> -> Idle [(always)]"
        assert format_transition(idle.state.transitions[0]) == "Idle -> <Exit> [!Flag]"


class TestSummarize:
    """Tests for the summary dictionary."""

    def test_summarize_layers(self, aac: AnimatorAsCode) -> None:
        """Should list layers in order with their states."""
        layer = aac.create_main_layer()
        layer.new_state("Idle")
        aac.create_supporting_layer("Hands").with_avatar_mask_no_transforms()

        summary = summarize(aac.container)

        assert [entry["name"] for entry in summary["layers"]] == ["Test", "Test__Hands"]
        assert summary["layers"][0]["states"] == ["Idle"]
        assert summary["layers"][1]["mask"] == "zAutogenerated__test__Test__Hands__AvatarMask_3"
        assert summary["sub_resources"] == {"clip": 2, "avatar_mask": 1}
