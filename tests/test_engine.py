"""
Tests for engine executor — ordering, abort on failure, warnings, dry run.
"""

from bertenv.adapters.mock import MockAdapter
from bertenv.adapters.registry import AdapterRegistry
from bertenv.core.engine.executor import InstallPlan, Phase, PlanStep, execute_plan
from bertenv.core.models.action import Action


def _step(step_id: str, fatal: bool = True, kind: str = "command-failed") -> PlanStep:
    return PlanStep(
        action=Action(id=step_id, adapter="shell", params={"argv": ["echo", step_id]}),
        failure=f"{step_id} failed!",
        hint=[f"fix {step_id}"],
        error_kind=kind,
        fatal=fatal,
    )


def _plan(*steps: PlanStep) -> InstallPlan:
    return InstallPlan(phases=[
        Phase(number=1, title="first", steps=list(steps[:2])),
        Phase(number=2, title="second", steps=list(steps[2:])),
    ])


class TestInstallPlan:
    def test_phase_totals_and_labels(self):
        plan = _plan(_step("a"), _step("b"), _step("c"))
        assert [p.label for p in plan.phases] == ["[1/2] first", "[2/2] second"]
        assert plan.total_steps == 3
        assert plan.step("b").id == "b"
        assert plan.step("zzz") is None


class TestExecutePlan:
    def test_all_ok(self, mock_registry: AdapterRegistry, mock_adapter: MockAdapter):
        report = execute_plan(_plan(_step("a"), _step("b"), _step("c")), mock_registry)
        assert report.status == "ok"
        assert report.ok
        assert mock_adapter.called_ids == ["a", "b", "c"]

    def test_fatal_failure_stops_run(self, mock_registry: AdapterRegistry, mock_adapter: MockAdapter):
        mock_adapter.set_failure("b", "exit 1")
        report = execute_plan(_plan(_step("a"), _step("b"), _step("c")), mock_registry)
        assert report.status == "failed"
        assert report.failed_step == "b"
        assert report.error == "b failed!"
        assert report.detail == "exit 1"
        assert report.hint == ["fix b"]
        assert report.error_kind == "command-failed"
        assert mock_adapter.called_ids == ["a", "b"]

    def test_error_kind_comes_from_step(self, mock_registry: AdapterRegistry, mock_adapter: MockAdapter):
        mock_adapter.set_failure("c")
        report = execute_plan(
            _plan(_step("a"), _step("b"), _step("c", kind="verification-failed")), mock_registry
        )
        assert report.error_kind == "verification-failed"

    def test_non_fatal_failure_is_a_warning(self, mock_registry: AdapterRegistry, mock_adapter: MockAdapter):
        mock_adapter.set_failure("a", "no driver")
        report = execute_plan(_plan(_step("a", fatal=False), _step("b"), _step("c")), mock_registry)
        assert report.status == "ok"
        assert report.warnings == ["a failed!: no driver"]
        assert mock_adapter.called_ids == ["a", "b", "c"]

    def test_dry_run(self):
        registry = AdapterRegistry()
        mock = MockAdapter(adapter_name="shell")
        registry.register(mock)
        report = execute_plan(_plan(_step("a"), _step("b")), registry, dry_run=True)
        assert report.status == "planned"
        assert all(r.status == "skipped" for r in report.receipts)
        assert mock.call_count == 0

    def test_observer_events(self, mock_registry: AdapterRegistry):
        events: list[tuple[str, str]] = []

        def observer(event, subject, receipt):
            name = subject.title if isinstance(subject, Phase) else subject.id
            events.append((event, name))

        execute_plan(_plan(_step("a"), _step("b"), _step("c")), mock_registry, observer=observer)
        assert events == [
            ("phase", "first"),
            ("start", "a"), ("done", "a"),
            ("start", "b"), ("done", "b"),
            ("phase", "second"),
            ("start", "c"), ("done", "c"),
        ]

    def test_to_dict(self, mock_registry: AdapterRegistry, mock_adapter: MockAdapter):
        mock_adapter.set_failure("a")
        data = execute_plan(_plan(_step("a"), _step("b")), mock_registry).to_dict()
        assert data["status"] == "failed"
        assert data["failed_step"] == "a"
        assert len(data["receipts"]) == 1
