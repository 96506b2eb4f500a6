"""
Engine executor — runs an install plan, strictly in order.

Flow:
    plan (phases → steps → actions) → dispatch each action → receipts
    → first failed fatal step aborts the run

Nothing is retried and nothing is rolled back: an environment created
by an earlier step stays on disk when a later step fails.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Literal

from bertenv.adapters.registry import AdapterRegistry
from bertenv.core.models.action import Action, Receipt
from bertenv.core.models.options import ErrorKind

logger = logging.getLogger(__name__)


@dataclass
class PlanStep:
    """One action plus everything needed to report on it."""

    action: Action
    title: str = ""                      # printed before running
    title_style: Literal["info", "warning"] = "info"
    success: str = ""                    # printed after success; may use {output}
    failure: str = ""                    # printed when the step fails
    hint: list[str] = field(default_factory=list)
    error_kind: ErrorKind = "command-failed"
    fatal: bool = True
    echo_output: bool = False            # print the command's stdout on success

    @property
    def id(self) -> str:
        return self.action.id

    def success_message(self, receipt: Receipt) -> str:
        return self.success.format(output=receipt.output.strip())


@dataclass
class Phase:
    """A numbered group of steps, shown as ``[n/total] title``."""

    number: int
    title: str
    steps: list[PlanStep] = field(default_factory=list)
    total: int = 0

    @property
    def label(self) -> str:
        return f"[{self.number}/{self.total or self.number}] {self.title}"


@dataclass
class InstallPlan:
    """Ordered phases of an install run."""

    phases: list[Phase] = field(default_factory=list)

    def __post_init__(self) -> None:
        for phase in self.phases:
            phase.total = len(self.phases)

    @property
    def total_phases(self) -> int:
        return len(self.phases)

    @property
    def steps(self) -> list[PlanStep]:
        return [s for p in self.phases for s in p.steps]

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    def step(self, step_id: str) -> PlanStep | None:
        for s in self.steps:
            if s.id == step_id:
                return s
        return None


@dataclass
class InstallReport:
    """Result of executing a plan."""

    status: Literal["ok", "failed", "planned"] = "ok"
    receipts: list[Receipt] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    failed_step: str | None = None
    error_kind: ErrorKind | None = None
    error: str | None = None
    detail: str | None = None
    hint: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status != "failed"

    @property
    def executed_ids(self) -> list[str]:
        return [r.action_id for r in self.receipts]

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "failed_step": self.failed_step,
            "error_kind": self.error_kind,
            "error": self.error,
            "detail": self.detail,
            "hint": self.hint,
            "warnings": self.warnings,
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
        }


# Observer events: ("phase", Phase, None), ("start", PlanStep, None),
# ("done", PlanStep, Receipt)
Observer = Callable[[str, object, Receipt | None], None]


def _notify(observer: Observer | None, event: str, subject: object, receipt: Receipt | None = None) -> None:
    if observer is not None:
        observer(event, subject, receipt)


def execute_plan(
    plan: InstallPlan,
    registry: AdapterRegistry,
    working_dir: str = ".",
    dry_run: bool = False,
    observer: Observer | None = None,
) -> InstallReport:
    """Execute every step of a plan through the adapter registry.

    Args:
        plan: The install plan.
        registry: Adapter registry for dispatch.
        working_dir: Invocation directory; relative paths resolve here.
        dry_run: If True, list the commands but execute nothing.
        observer: Optional progress callback.

    Returns:
        InstallReport. ``status`` is ``failed`` as soon as one fatal
        step fails; later steps are never dispatched.
    """
    report = InstallReport(status="planned" if dry_run else "ok")

    for phase in plan.phases:
        _notify(observer, "phase", phase)

        for step in phase.steps:
            _notify(observer, "start", step)

            receipt = registry.execute_action(
                action=step.action,
                working_dir=working_dir,
                dry_run=dry_run,
            )
            report.receipts.append(receipt)
            _notify(observer, "done", step, receipt)

            status_marker = "✓" if receipt.ok else "✗" if receipt.failed else "⊘"
            logger.info("%s %s → %s (%dms)", status_marker, step.id, receipt.status, receipt.duration_ms)

            if not receipt.failed:
                continue

            if not step.fatal:
                report.warnings.append(f"{step.failure}: {receipt.error}" if step.failure else (receipt.error or step.id))
                continue

            report.status = "failed"
            report.failed_step = step.id
            report.error_kind = step.error_kind
            report.error = step.failure or f"Step '{step.id}' failed"
            report.detail = receipt.error
            report.hint = list(step.hint)
            logger.info("Aborting at %s: %s", step.id, receipt.error)
            return report

    return report
