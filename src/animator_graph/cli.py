"""
Animator Graph CLI - run build scripts against controller assets.

Commands:
    build         Run a build script and save the asset
    inspect       Show layers, parameters and transitions of an asset
    remove-layer  Remove a layer by name
"""

import importlib.util
import sys
from pathlib import Path

import click
from rich.console import Console

console = Console()


@click.group()
@click.version_option(version="0.1.0")
@click.option("--config", "-c", type=Path, help="Path to config file")
@click.pass_context
def main(ctx: click.Context, config: Path | None) -> None:
    """Animator Graph - declarative animation state graph builder"""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config or Path("animator-graph.yaml")


def _load_build_function(script: Path):
    spec = importlib.util.spec_from_file_location(f"_animator_build_{script.stem}", script)
    if spec is None or spec.loader is None:
        raise click.ClickException(f"Cannot import build script: {script}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[spec.name] = module
    try:
        spec.loader.exec_module(module)
    finally:
        sys.modules.pop(spec.name, None)

    build = getattr(module, "build", None)
    if not callable(build):
        raise click.ClickException(f"{script} does not define build(aac)")
    return build


@main.command()
@click.argument("script", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--asset", "-a", required=True, type=Path, help="Controller asset (YAML)")
@click.option("--keep-assets", is_flag=True, help="Do not clear previously generated resources")
@click.pass_context
def build(ctx: click.Context, script: Path, asset: Path, keep_assets: bool) -> None:
    """Run SCRIPT's build(aac) against ASSET and save it."""
    from animator_graph.assets.container import AssetContainer
    from animator_graph.builder.base import AnimatorAsCode
    from animator_graph.config import AnimatorConfig
    from animator_graph.errors import AnimatorGraphError

    try:
        config = AnimatorConfig.load(ctx.obj["config_path"])
    except ValueError as e:
        raise click.ClickException(f"Invalid config: {e}") from e
    try:
        container = AssetContainer.load_or_create(asset, asset_key=config.asset_key)
    except AnimatorGraphError as e:
        raise click.ClickException(f"Cannot load asset: {e}") from e
    aac = AnimatorAsCode(config, container)

    if not keep_assets:
        aac.clear_previous_assets()

    build_fn = _load_build_function(script)
    try:
        build_fn(aac)
    except AnimatorGraphError as e:
        raise click.ClickException(f"Build failed: {e}") from e

    container.save(asset)
    console.print(
        f"[green]✓[/green] Built {len(container.controller.layers)} layer(s) into {asset}"
    )


@main.command()
@click.argument("asset", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="JSON output")
@click.option("--verbose", "-v", is_flag=True, help="Include transitions")
def inspect(asset: Path, as_json: bool, verbose: bool) -> None:
    """Show layers, parameters and transitions."""
    from animator_graph.errors import AnimatorGraphError
    from animator_graph.summary import show_asset

    try:
        show_asset(asset, json_output=as_json, verbose=verbose)
    except AnimatorGraphError as e:
        raise click.ClickException(f"Cannot load asset: {e}") from e


@main.command(name="remove-layer")
@click.argument("asset", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("layer_name")
def remove_layer(asset: Path, layer_name: str) -> None:
    """Remove LAYER_NAME from ASSET (no-op when absent)."""
    from animator_graph.assets.container import AssetContainer
    from animator_graph.builder.layers import LayerRemoval
    from animator_graph.errors import AnimatorGraphError

    try:
        container = AssetContainer.load(asset)
    except AnimatorGraphError as e:
        raise click.ClickException(f"Cannot load asset: {e}") from e
    removed = LayerRemoval(container.controller).remove_layer(layer_name)
    container.save(asset)

    if removed:
        console.print(f"[green]✓[/green] Removed layer {layer_name}")
    else:
        console.print(f"[yellow]⚠[/yellow] No layer named {layer_name}")


if __name__ == "__main__":
    main()
