import asyncio
import logging

import pytest

from common.validation_engine.check import Check
from common.validation_engine.checks import CodeQualityCheck, SecurityCheck
from common.validation_engine.models import CheckOutcome
from common.validation_engine.runner import CheckRunner


def _names(report):
    return [o.check_name for o in report.outcomes]


@pytest.mark.asyncio
async def test_sequential_runs_in_registration_order(make_stub, make_runner):
    runner = make_runner([make_stub("A"), make_stub("B", passed=False), make_stub("C")])
    report = await runner.execute({})
    assert _names(report) == ["A", "B", "C"]
    assert report.passed is False
    assert report.failed_count == 1


@pytest.mark.asyncio
async def test_stop_on_first_failure_sequential(make_stub, make_runner):
    a, b, c = make_stub("A"), make_stub("B", passed=False), make_stub("C")
    report = await make_runner([a, b, c], stop_on_first_failure=True).execute({})
    assert _names(report) == ["A", "B"]
    assert c.calls == 0


@pytest.mark.asyncio
async def test_stop_on_first_failure_ignored_when_concurrent(make_stub, make_runner):
    a, b, c = make_stub("A"), make_stub("B", passed=False), make_stub("C")
    report = await make_runner([a, b, c], stop_on_first_failure=True, concurrent=True).execute({})
    assert sorted(_names(report)) == ["A", "B", "C"]
    assert c.calls == 1


@pytest.mark.asyncio
async def test_concurrent_outcomes_follow_completion_order(make_stub, make_runner):
    # Completion order, not registration order, is the documented behaviour.
    runner = make_runner([make_stub("slow", delay=0.05), make_stub("fast")], concurrent=True)
    report = await runner.execute({})
    assert _names(report) == ["fast", "slow"]


@pytest.mark.asyncio
async def test_concurrent_checks_overlap(make_stub, make_runner):
    checks = [make_stub(f"c{i}", delay=0.1) for i in range(5)]
    loop = asyncio.get_running_loop()
    started = loop.time()
    report = await make_runner(checks, concurrent=True).execute({})
    assert loop.time() - started < 0.4
    assert report.total == 5


@pytest.mark.asyncio
async def test_disabled_checks_are_absent(make_stub, make_runner):
    disabled = make_stub("off", passed=False, enabled=False)
    report = await make_runner([make_stub("on"), disabled]).execute({})
    assert _names(report) == ["on"]
    assert report.passed is True
    assert disabled.calls == 0


@pytest.mark.asyncio
async def test_context_opt_out_produces_no_outcome(make_runner):
    class NeedsProtocol(SecurityCheck):
        def should_run(self, context):
            return super().should_run(context) and context.has("protocol")

    report = await make_runner([NeedsProtocol(), CodeQualityCheck()]).execute({"coverage": 90})
    assert _names(report) == ["CodeQuality"]


@pytest.mark.asyncio
@pytest.mark.parametrize("concurrent", [False, True])
async def test_fault_is_isolated_to_one_outcome(make_stub, make_runner, concurrent):
    runner = make_runner(
        [make_stub("A"), make_stub("Broken", error=RuntimeError("boom")), make_stub("C")],
        concurrent=concurrent,
    )
    report = await runner.execute({})
    assert sorted(_names(report)) == ["A", "Broken", "C"]
    broken = [o for o in report.outcomes if o.check_name == "Broken"]
    assert len(broken) == 1
    assert broken[0].passed is False
    assert "boom" in broken[0].message
    assert broken[0].details["error_type"] == "RuntimeError"
    assert "Traceback" in broken[0].details["traceback"]
    assert report.passed_count == 2


@pytest.mark.asyncio
async def test_fault_counts_as_failure_for_stop_on_first_failure(make_stub, make_runner):
    c = make_stub("C")
    runner = make_runner([make_stub("Broken", error=ValueError("bad")), c], stop_on_first_failure=True)
    report = await runner.execute({})
    assert _names(report) == ["Broken"]
    assert c.calls == 0


@pytest.mark.asyncio
async def test_missing_evaluate_goes_through_fault_path(make_runner):
    class Unimplemented(Check):
        name = "Unimplemented"

    report = await make_runner([Unimplemented(), CodeQualityCheck()]).execute({})
    outcome = report.outcomes[0]
    assert outcome.check_name == "Unimplemented"
    assert outcome.passed is False
    assert outcome.details["error_type"] == "NotImplementedError"
    assert report.outcomes[1].passed is True


@pytest.mark.asyncio
async def test_wrong_return_type_is_a_fault(make_runner):
    class ReturnsBool(Check):
        name = "ReturnsBool"

        async def evaluate(self, context):
            return True

    report = await make_runner([ReturnsBool()]).execute({})
    assert report.outcomes[0].passed is False
    assert report.outcomes[0].details["error_type"] == "TypeError"


@pytest.mark.asyncio
async def test_synchronous_evaluate_is_supported(make_runner):
    class SyncCheck(Check):
        name = "Sync"

        def evaluate(self, context):
            return self.outcome(context.get("ok", False), "sync")

    report = await make_runner([SyncCheck()]).execute({"ok": True})
    assert report.passed is True


@pytest.mark.asyncio
async def test_should_run_fault_is_isolated(make_stub, make_runner):
    class BadGate(Check):
        name = "BadGate"

        def should_run(self, context):
            raise KeyError("gate")

        async def evaluate(self, context):  # pragma: no cover
            return self.outcome(True)

    report = await make_runner([make_stub("A"), BadGate(), make_stub("C")]).execute({})
    assert _names(report) == ["A", "BadGate", "C"]
    assert report.outcomes[1].passed is False
    assert report.outcomes[1].details["phase"] == "should_run"


@pytest.mark.asyncio
async def test_should_run_fault_comes_first_when_concurrent(make_stub, make_runner):
    class BadGate(Check):
        name = "BadGate"

        def should_run(self, context):
            raise KeyError("gate")

    report = await make_runner([make_stub("A"), BadGate(), make_stub("C")], concurrent=True).execute({})
    assert _names(report)[0] == "BadGate"
    assert sorted(_names(report)[1:]) == ["A", "C"]
    assert report.outcomes[0].details["phase"] == "should_run"
    assert report.passed_count == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("concurrent", [False, True])
async def test_check_timeout_converts_stall_to_failure(make_stub, make_runner, concurrent):
    stuck = make_stub("stuck", delay=5)
    runner = make_runner([stuck, make_stub("quick")], check_timeout=0.05, concurrent=concurrent)
    report = await runner.execute({})
    by_name = {o.check_name: o for o in report.outcomes}
    if not concurrent:
        assert _names(report) == ["stuck", "quick"]
    assert by_name["stuck"].passed is False
    assert "timed out" in by_name["stuck"].message
    assert by_name["quick"].passed is True
    assert stuck.completed == 0


@pytest.mark.asyncio
async def test_timeout_error_raised_by_check_is_a_fault(make_stub, make_runner):
    runner = make_runner([make_stub("Raiser", error=asyncio.TimeoutError("upstream"))], check_timeout=1)
    outcome = (await runner.execute({})).outcomes[0]
    assert outcome.passed is False
    assert outcome.message.startswith("Check failed with error")
    assert outcome.details["error_type"] == "TimeoutError"
    assert outcome.details["phase"] == "evaluate"


@pytest.mark.asyncio
async def test_cancelling_concurrent_execute_cancels_in_flight_checks(make_stub, make_runner):
    checks = [make_stub("slow1", delay=0.2), make_stub("slow2", delay=0.2)]
    task = asyncio.ensure_future(make_runner(checks, concurrent=True).execute({}))
    await asyncio.sleep(0.05)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    await asyncio.sleep(0.3)
    assert [c.calls for c in checks] == [1, 1]
    assert [c.completed for c in checks] == [0, 0]


def test_invalid_timeout_rejected():
    with pytest.raises(ValueError):
        CheckRunner(check_timeout=0)


@pytest.mark.asyncio
async def test_duplicate_names_are_kept(make_stub, make_runner):
    runner = make_runner()
    runner.register(make_stub("dup"))
    runner.register_many([make_stub("dup", passed=False)])
    report = await runner.execute({})
    assert _names(report) == ["dup", "dup"]
    assert report.failed_count == 1


@pytest.mark.asyncio
async def test_clear_does_not_affect_previous_report(make_stub, make_runner):
    runner = make_runner([make_stub("A")])
    report = await runner.execute({})
    runner.clear()
    assert runner.checks == ()
    assert _names(report) == ["A"]
    assert (await runner.execute({})).total == 0


@pytest.mark.asyncio
async def test_repeated_execution_is_deterministic(make_runner):
    runner = make_runner([CodeQualityCheck(), SecurityCheck()])
    ctx = {"coverage": 70, "protocol": "http"}
    first, second = await runner.execute(ctx), await runner.execute(ctx)

    def _content(report):
        return [(o.check_name, o.passed, o.message, o.details) for o in report.outcomes]

    assert _content(first) == _content(second)
    assert first.passed == second.passed
    assert first.run_id != second.run_id


@pytest.mark.asyncio
async def test_overlapping_executions_do_not_interfere(make_runner):
    runner = make_runner([CodeQualityCheck(min_coverage=80)], concurrent=True)
    low, high = await asyncio.gather(runner.execute({"coverage": 70}), runner.execute({"coverage": 90}))
    assert low.passed is False
    assert high.passed is True


@pytest.mark.asyncio
async def test_context_is_read_only_for_checks(make_runner):
    class Mutator(Check):
        name = "Mutator"

        async def evaluate(self, context):
            context["coverage"] = 0
            return self.outcome(True)

    ctx = {"coverage": 50}
    report = await make_runner([Mutator()]).execute(ctx)
    assert report.outcomes[0].passed is False
    assert report.outcomes[0].details["error_type"] == "TypeError"
    assert ctx == {"coverage": 50}


def test_execute_sync(make_stub):
    report = CheckRunner([make_stub("A")]).execute_sync()
    assert report.passed is True
    assert isinstance(report.outcomes[0], CheckOutcome)


@pytest.mark.asyncio
async def test_fault_is_logged(make_stub, make_runner, caplog):
    with caplog.at_level(logging.WARNING, logger="common.validation_engine.runner"):
        await make_runner([make_stub("Broken", error=RuntimeError("boom"))]).execute({})
    assert any("Broken" in rec.getMessage() for rec in caplog.records)
