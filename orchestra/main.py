"""
Workspace Orchestra — CLI entrypoint.

Usage:
    orchestra run build
    orchestra run test blake2bhash ed25519 true
    orchestra run clippy
    orchestra plan test sm3hash sm2
    orchestra inventory
    orchestra config check
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from orchestra import __version__
from orchestra.core.models.invocation import Invocation
from orchestra.core.observability.logging_config import setup_from_environment


@click.group()
@click.version_option(version=__version__, prog_name="orchestra")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to orchestra.yml (default: auto-detect, then built-in plan).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Workspace Orchestra — ordered build, test and lint runs across a Cargo workspace."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_from_environment(debug=debug, verbose=verbose, quiet=quiet)


def _echo_invocation(invocation: Invocation) -> None:
    if invocation.skipped:
        click.secho(f"⊘ {invocation.label} (skipped)", fg="yellow")
    else:
        click.secho(f"▶ {invocation.label}", fg="cyan", bold=True)


@cli.command()
@click.argument("action")
@click.argument("hash_name", metavar="[HASH]", required=False, default="")
@click.argument("crypto_name", metavar="[CRYPTO]", required=False, default="")
@click.argument("upload", metavar="[UPLOAD]", required=False, default=False, type=click.BOOL)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--mock", is_flag=True, help="Use mock adapter (no real execution).")
@click.pass_context
def run(
    ctx: click.Context,
    action: str,
    hash_name: str,
    crypto_name: str,
    upload: bool,
    as_json: bool,
    mock: bool,
) -> None:
    """Run ACTION (build, test or clippy) across the workspace.

    HASH is one of sha3hash, blake2bhash, sm3hash (default sha3hash).
    CRYPTO is one of secp256k1, ed25519, sm2 (default secp256k1).
    UPLOAD uploads coverage after a successful test run.

    Examples:

        orchestra run build

        orchestra run test blake2bhash ed25519 true

        orchestra run clippy --mock
    """
    from orchestra.core.use_cases.run import run_action

    quiet = ctx.obj.get("quiet", False)
    progress = None if (as_json or quiet) else _echo_invocation

    result = run_action(
        action=action,
        hash_name=hash_name,
        crypto_name=crypto_name,
        upload=upload,
        config_path=ctx.obj.get("config_path"),
        mock_mode=mock,
        on_invocation=progress,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.exit_code)

    click.echo()
    if not result.ok:
        click.secho(f"❌ {result.error}", fg="red", bold=True)
        if result.unaccounted:
            click.echo("   Wire these modules into the plan:")
            for name in result.unaccounted:
                click.echo(f"     • {name}")
        sys.exit(result.exit_code)

    assert result.action is not None and result.selection is not None
    mode_label = "[mock] " if mock else ""
    click.secho(
        f"✅ {mode_label}{result.action.value} ({result.selection}) — "
        f"{result.executed} executed, {result.skipped} skipped",
        fg="green",
        bold=True,
    )

    coverage = result.coverage
    if coverage is not None:
        click.echo(
            f"   Coverage: {len(coverage.instrumented)}/{len(coverage.artifacts)} artifacts"
        )
        for name, error in coverage.failures.items():
            click.secho(f"     ✗ {name}: {error.splitlines()[0] if error else ''}", fg="yellow")
        if coverage.uploaded:
            click.secho("   📤 Coverage uploaded", fg="cyan")
        elif coverage.upload_error:
            click.secho(f"   ⚠️  {coverage.upload_error}", fg="yellow")

    click.echo()


@cli.command()
@click.argument("action")
@click.argument("hash_name", metavar="[HASH]", required=False, default="")
@click.argument("crypto_name", metavar="[CRYPTO]", required=False, default="")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def plan(
    ctx: click.Context,
    action: str,
    hash_name: str,
    crypto_name: str,
    as_json: bool,
) -> None:
    """Show the ordered invocations for ACTION without running them."""
    from orchestra.core.use_cases.plan import preview_plan

    result = preview_plan(
        action=action,
        hash_name=hash_name,
        crypto_name=crypto_name,
        config_path=ctx.obj.get("config_path"),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    execution_plan = result.plan
    assert execution_plan is not None and result.workspace is not None

    click.secho(
        f"\n📋 {result.workspace.name}: {execution_plan.action.value} "
        f"({execution_plan.selection})",
        fg="cyan",
        bold=True,
    )
    current_stage = None
    for invocation in execution_plan.invocations:
        if invocation.stage != current_stage:
            current_stage = invocation.stage
            click.secho(f"   {current_stage}", fg="white", bold=True)
        if invocation.skipped:
            click.secho(f"     ⊘ {invocation.label}", fg="yellow")
        else:
            click.echo(f"     • {invocation.label}")

    click.echo()
    click.echo(
        f"   {execution_plan.total} invocations: "
        f"{execution_plan.executed} to run, {execution_plan.skipped} skipped"
    )
    click.echo()


@cli.command()
@click.argument("action", required=False, default="build")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def inventory(ctx: click.Context, action: str, as_json: bool) -> None:
    """Check workspace modules against the plan for ACTION (default: build)."""
    from orchestra.core.use_cases.inventory import check_inventory

    result = check_inventory(action=action, config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.complete else 1)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    click.secho(f"\n🔍 Inventory: {result.workspace_root}", fg="cyan", bold=True)
    click.echo(f"   Modules on disk: {len(result.inventory)}")
    click.echo(f"   Modules planned: {len(result.planned)} ({len(result.skipped)} skipped)")

    if result.missing_on_disk:
        click.echo()
        click.secho("   ⚠️  Planned but not on disk:", fg="yellow")
        for name in result.missing_on_disk:
            click.echo(f"     • {name}")

    if result.unaccounted:
        click.echo()
        click.secho("   ❌ On disk but not in the plan:", fg="red", bold=True)
        for name in result.unaccounted:
            click.echo(f"     • {name}")
        click.echo()
        sys.exit(1)

    click.echo()
    click.secho("   ✅ Every module is accounted for", fg="green")
    click.echo()


@cli.group()
def config() -> None:
    """Workspace plan configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate orchestra.yml."""
    from orchestra.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        assert result.workspace is not None
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   Workspace: {result.workspace.name}")
        click.echo(f"   Stages: {len(result.workspace.stages)}")
        click.echo(f"   Modules: {len(result.workspace.module_names())}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)

    click.echo()


if __name__ == "__main__":
    cli()
