"""
bertenv — CLI entrypoint.

Usage:
    python -m bertenv.main --help
    python -m bertenv.main install venv cpu
    python -m bertenv.main install conda gpu 111 bert_env
    python -m bertenv.main channels
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from bertenv import __version__
from bertenv.core.observability.logging_config import setup_cli_logging


@click.group()
@click.version_option(version=__version__, prog_name="bertenv")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to installer.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """bertenv — set up the BERT text-classification environment."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_cli_logging(debug=debug, verbose=verbose, quiet=quiet)


@cli.group()
def config() -> None:
    """Installer configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate installer.yml."""
    from bertenv.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        assert result.settings is not None  # guaranteed when valid
        settings = result.settings
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        source = result.config_path or "built-in defaults"
        click.echo(f"   Source: {source}")
        click.echo(f"   PyTorch: {settings.torch_version} / torchvision {settings.torchvision_version}")
        click.echo(f"   Requirements: {settings.requirements}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    click.echo()
    if not result.valid:
        sys.exit(1)


# ── Register sub-commands from bertenv/ui/cli/ ────────────────────

from bertenv.ui.cli.channels import channels  # noqa: E402
from bertenv.ui.cli.install import install, verify  # noqa: E402

cli.add_command(install)
cli.add_command(verify)
cli.add_command(channels)


if __name__ == "__main__":
    cli()
