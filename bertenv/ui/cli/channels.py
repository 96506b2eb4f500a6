"""
CLI command listing the supported CUDA builds.
"""

from __future__ import annotations

import json

import click


@click.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def channels(as_json: bool) -> None:
    """List CUDA version codes and the wheel channel each one selects."""
    from bertenv.core.data.cuda_channels import CUDA_CHANNELS, DEFAULT_CUDA_CODE, min_driver_for

    rows = [
        {
            "code": c.code,
            "channel": c.channel,
            "label": c.label,
            "min_driver": min_driver_for(c.toolkit),
            "default": c.code == DEFAULT_CUDA_CODE,
        }
        for c in CUDA_CHANNELS.values()
    ]

    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return

    click.secho("🎮 CUDA builds:", fg="cyan", bold=True)
    for row in rows:
        default = " (default)" if row["default"] else ""
        driver = f"driver >= {row['min_driver']}" if row["min_driver"] else ""
        click.echo(f"   {row['code']:<6} {row['channel']:<8} {row['label']:<12} {driver}{default}")
    click.echo()
