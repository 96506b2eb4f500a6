"""
CLI commands for installing and verifying the environment.

Thin wrappers over ``bertenv.core.use_cases.install``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from bertenv.core.engine.executor import Phase, PlanStep
from bertenv.core.models.action import Receipt

_RULE = "=" * 40


def _load_settings(ctx: click.Context, as_json: bool = False):
    """Load installer.yml (explicit --config or auto-detected), exit 1 on error."""
    from bertenv.core.config.loader import ConfigError, load_settings

    try:
        return load_settings(ctx.obj.get("config_path"))
    except ConfigError as e:
        _fail(str(e), kind="config-error", as_json=as_json)


def _fail(message: str, kind: str, details: list[str] | None = None, as_json: bool = False) -> None:
    if as_json:
        click.echo(json.dumps({"error": message, "error_kind": kind, "details": details or []}, indent=2))
    else:
        click.secho(f"❌ {message}", fg="red")
        for line in details or []:
            click.secho(f"   {line}", fg="red")
    sys.exit(1)


class ProgressReporter:
    """Executor observer that prints each step as it runs."""

    def __init__(self, dry_run: bool = False, verbose: bool = False):
        self.dry_run = dry_run
        self.verbose = verbose

    def __call__(self, event: str, subject: object, receipt: Receipt | None) -> None:
        if event == "phase":
            assert isinstance(subject, Phase)
            click.echo()
            click.secho(subject.label, fg="cyan")
        elif event == "start":
            assert isinstance(subject, PlanStep)
            if subject.title:
                click.secho(subject.title, fg="yellow" if subject.title_style == "warning" else "cyan")
        elif event == "done":
            assert isinstance(subject, PlanStep) and receipt is not None
            self._done(subject, receipt)

    def _done(self, step: PlanStep, receipt: Receipt) -> None:
        if receipt.status == "skipped":
            click.echo(f"   $ {step.action.display}")
            return

        if receipt.ok:
            if step.echo_output and receipt.output:
                for line in receipt.output.splitlines():
                    click.echo(line)
            if step.success:
                click.secho(step.success_message(receipt), fg="green")
            timing = f" ({receipt.duration_ms}ms)" if receipt.duration_ms else ""
            if self.verbose and timing:
                click.echo(f"   ✓ {step.id}{timing}")
            return

        if not step.fatal:
            click.secho(f"⚠️  {step.failure}: {receipt.error}", fg="yellow")
            return

        click.secho(f"❌ {step.failure}", fg="red")
        if receipt.error:
            for line in receipt.error.splitlines()[-10:]:
                click.echo(f"     │ {line}")
        for line in step.hint:
            click.secho(f"   {line}", fg="red")


def _print_header(env_type: str, device: str) -> None:
    click.echo()
    click.secho(_RULE, fg="green")
    click.secho("BERT Text Classification - Auto Installer", fg="green")
    click.secho(f"Environment: {env_type} | Device: {device}", fg="green")
    click.secho(_RULE, fg="green")


def _print_success(result) -> None:
    click.echo()
    click.secho(_RULE, fg="green")
    click.secho("✅ Installation Completed Successfully!", fg="green", bold=True)
    click.secho(_RULE, fg="green")
    click.echo()

    guidance = result.guidance
    if guidance is None:
        return
    click.secho("📝 Next Steps:", fg="cyan")
    for i, line in enumerate(guidance.steps, start=1):
        click.echo(f"   {i}. {line}")
    if guidance.gpu_hint:
        click.echo()
        click.secho(guidance.gpu_hint, fg="yellow")
    click.echo()


@click.command()
@click.argument("args", nargs=-1)
@click.option("--env-type", "-e", default=None, help="venv or conda (default: venv).")
@click.option("--device", "-d", default=None, help="cpu or gpu (default: cpu).")
@click.option("--cuda", default=None, help="CUDA version code: 102, 110, 111, 113 (default: 111).")
@click.option("--env-name", "-n", default=None, help="Conda environment name (default: bert_env).")
@click.option("--requirements", "-r", default=None, help="Dependency manifest (default: requirements.txt).")
@click.option("--dry-run", is_flag=True, help="Show the commands without running them.")
@click.option("--mock", is_flag=True, help="Use mock adapter (no real execution).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(
    ctx: click.Context,
    args: tuple[str, ...],
    env_type: str | None,
    device: str | None,
    cuda: str | None,
    env_name: str | None,
    requirements: str | None,
    dry_run: bool,
    mock: bool,
    as_json: bool,
) -> None:
    """Create the environment and install PyTorch plus dependencies.

    Positional form mirrors the classic install script:

        bertenv install venv cpu

        bertenv install conda gpu 111 my_env

        bertenv install --device gpu --cuda 113 --dry-run
    """
    from bertenv.core.models.options import InvalidArgumentError
    from bertenv.core.services.arguments import merge_positional, resolve_options
    from bertenv.core.use_cases.install import run_install

    try:
        values = merge_positional(
            args,
            {"env_type": env_type, "device": device, "cuda": cuda, "env_name": env_name},
        )
        options = resolve_options(**values)
    except InvalidArgumentError as e:
        _fail(str(e), kind=e.kind, details=e.details, as_json=as_json)
        return

    settings = _load_settings(ctx, as_json=as_json)

    observer = None
    if not as_json:
        _print_header(options.env_type, options.device)
        if dry_run:
            click.secho("   [dry-run] nothing will be executed", fg="yellow")
        observer = ProgressReporter(dry_run=dry_run, verbose=ctx.obj.get("verbose", False))

    result = run_install(
        options,
        settings=settings,
        working_dir=Path.cwd(),
        requirements=requirements,
        dry_run=dry_run,
        mock_mode=mock,
        observer=observer,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.exit_code)

    report = result.report
    if report.status == "failed":
        click.echo()
        sys.exit(1)

    if report.status == "planned":
        click.echo()
        click.secho(f"   {result.plan.total_steps} steps planned, none executed.", fg="yellow")
        click.echo()
        return

    _print_success(result)


@click.command()
@click.argument("env_type_arg", metavar="[ENV_TYPE]", required=False)
@click.option("--env-name", "-n", default=None, help="Conda environment name (default: bert_env).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def verify(ctx: click.Context, env_type_arg: str | None, env_name: str | None, as_json: bool) -> None:
    """Re-run the final import check against an existing environment."""
    from bertenv.core.models.options import InvalidArgumentError
    from bertenv.core.services.arguments import resolve_options
    from bertenv.core.use_cases.install import run_verify

    try:
        options = resolve_options(env_type=env_type_arg, env_name=env_name)
    except InvalidArgumentError as e:
        _fail(str(e), kind=e.kind, details=e.details, as_json=as_json)
        return

    settings = _load_settings(ctx, as_json=as_json)
    observer = None if as_json else ProgressReporter(verbose=ctx.obj.get("verbose", False))

    result = run_verify(options, settings=settings, working_dir=Path.cwd(), observer=observer)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.exit_code)

    click.echo()
    if not result.ok:
        sys.exit(1)
    click.secho(f"✅ Environment '{result.handle.location}' is ready", fg="green", bold=True)
    click.echo()
