"""
Asset Summary - Display the contents of a saved controller asset.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from animator_graph.assets.container import AssetContainer, count_by_type
from animator_graph.controller.models import (
    AnimatorState,
    AnimatorTransition,
    Condition,
    ConditionMode,
    Marker,
)

console = Console()

_MODE_SYMBOLS = {
    ConditionMode.GREATER: ">",
    ConditionMode.LESS: "<",
    ConditionMode.EQUALS: "==",
    ConditionMode.NOT_EQUAL: "!=",
}


def format_condition(condition: Condition) -> str:
    if condition.mode == ConditionMode.IF:
        return condition.parameter
    if condition.mode == ConditionMode.IF_NOT:
        return f"!{condition.parameter}"
    threshold = condition.threshold
    shown = int(threshold) if float(threshold).is_integer() else threshold
    return f"{condition.parameter} {_MODE_SYMBOLS[condition.mode]} {shown}"


def _node_label(node: AnimatorState | Marker) -> str:
    if isinstance(node, Marker):
        return {
            Marker.ANY_STATE: "<Any State>",
            Marker.ENTRY: "<Entry>",
            Marker.EXIT: "<Exit>",
        }[node]
    return node.name


def format_transition(transition: AnimatorTransition) -> str:
    guard = " && ".join(format_condition(c) for c in transition.conditions) or "(always)"
    return f"{_node_label(transition.source)} -> {_node_label(transition.destination)} [{guard}]"


def summarize(container: AssetContainer) -> dict[str, Any]:
    """Summary dictionary used by both output modes."""
    controller = container.controller
    layers = []
    for index, layer in enumerate(controller.layers):
        machine = layer.state_machine
        layers.append(
            {
                "index": index,
                "name": layer.name,
                "weight": layer.default_weight,
                "mask": layer.avatar_mask.name if layer.avatar_mask else None,
                "states": [s.name for s in machine.states],
                "transitions": [format_transition(t) for t in machine.all_transitions()],
            }
        )

    return {
        "asset_key": container.asset_key,
        "parameters": [p.to_dict() for p in controller.parameters],
        "layers": layers,
        "sub_resources": count_by_type(container.sub_resources),
    }


def show_asset(asset_path: Path, json_output: bool = False, verbose: bool = False) -> None:
    """Print layers, parameters and (optionally) transitions of an asset."""
    container = AssetContainer.load(asset_path)
    summary = summarize(container)

    if json_output:
        print(json.dumps(summary, indent=2))
        return

    console.print(f"\n[bold blue]Controller {escape(container.controller.name)}[/bold blue]\n")

    layers_table = Table(title="Layers")
    layers_table.add_column("#", justify="right")
    layers_table.add_column("Name", style="cyan")
    layers_table.add_column("Weight", justify="right")
    layers_table.add_column("Mask")
    layers_table.add_column("States", justify="right")
    layers_table.add_column("Transitions", justify="right")

    for layer in summary["layers"]:
        layers_table.add_row(
            str(layer["index"]),
            escape(layer["name"]),
            f"{layer['weight']:.2f}",
            escape(layer["mask"] or "-"),
            str(len(layer["states"])),
            str(len(layer["transitions"])),
        )
    console.print(layers_table)

    params_table = Table(title="Parameters")
    params_table.add_column("Name", style="cyan")
    params_table.add_column("Kind")
    params_table.add_column("Default", justify="right")
    for param in summary["parameters"]:
        params_table.add_row(escape(param["name"]), param["kind"], str(param["default"]))
    console.print(params_table)

    if verbose:
        for layer in summary["layers"]:
            console.print(f"\n[bold]{escape(layer['name'])}[/bold]")
            for line in layer["transitions"]:
                console.print(f"  {escape(line)}")

    counts = ", ".join(f"{k}={v}" for k, v in sorted(summary["sub_resources"].items()))
    console.print(f"\n[dim]Sub-resources:[/dim] {counts or 'none'}")
