from __future__ import annotations

import asyncio
import inspect
import logging
import time
import traceback
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from .check import Check
from .context import ValidationContext
from .models import CheckOutcome, RunReport

logger = logging.getLogger(__name__)

# The event loop may fire a timer up to one clock tick early.
_CLOCK_RESOLUTION = time.get_clock_info("monotonic").resolution


class CheckRunner:
    """Executes registered checks against a context and aggregates a report.

    Sequential mode runs checks one at a time in registration order and honours
    `stop_on_first_failure`. Concurrent mode starts every active check at once
    and always runs all of them to completion: `stop_on_first_failure` has no
    effect there, and outcomes are ordered by completion, not registration.

    A fault raised inside a check becomes a failing outcome for that check; it
    never stops the other checks or escapes `execute`.

    Registration must not overlap an in-flight `execute`; there is no locking.
    """

    def __init__(
        self,
        checks: Optional[Iterable[Check]] = None,
        *,
        stop_on_first_failure: bool = False,
        concurrent: bool = False,
        check_timeout: Optional[float] = None,
    ):
        if check_timeout is not None and check_timeout <= 0:
            raise ValueError("check_timeout must be a positive number of seconds")
        self._checks: List[Check] = list(checks) if checks is not None else []
        self.stop_on_first_failure = stop_on_first_failure
        self.concurrent = concurrent
        self.check_timeout = check_timeout

    @property
    def checks(self) -> Tuple[Check, ...]:
        return tuple(self._checks)

    def register(self, check: Check) -> None:
        # Duplicate names are allowed and yield duplicate-named outcomes.
        self._checks.append(check)

    def register_many(self, checks: Iterable[Check]) -> None:
        self._checks.extend(checks)

    def clear(self) -> None:
        self._checks = []

    async def execute(self, context: Optional[Mapping[str, Any]] = None) -> RunReport:
        ctx = ValidationContext.coerce(context)
        started = time.perf_counter()
        checks = list(self._checks)
        logger.info(
            "Running %d registered check(s) (concurrent=%s, stop_on_first_failure=%s)",
            len(checks),
            self.concurrent,
            self.stop_on_first_failure,
        )

        # Entries are active checks, or outcomes for checks whose should_run raised.
        entries: List[Union[Check, CheckOutcome]] = []
        for check in checks:
            try:
                if check.should_run(ctx):
                    entries.append(check)
                else:
                    logger.debug("Skipping check %s", check.name)
            except Exception as exc:
                entries.append(self._fault_outcome(check, exc, phase="should_run"))

        outcomes: List[CheckOutcome] = []
        if self.concurrent:
            outcomes.extend(e for e in entries if isinstance(e, CheckOutcome))
            tasks = [asyncio.ensure_future(self._invoke(e, ctx)) for e in entries if isinstance(e, Check)]
            try:
                for next_done in asyncio.as_completed(tasks):
                    outcomes.append(await next_done)
            except BaseException:
                # Cancelled from outside: stop the checks still in flight before propagating.
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise
        else:
            for entry in entries:
                outcome = entry if isinstance(entry, CheckOutcome) else await self._invoke(entry, ctx)
                outcomes.append(outcome)
                if self.stop_on_first_failure and not outcome.passed:
                    logger.info("Stopping after failed check %s", outcome.check_name)
                    break

        duration_ms = round((time.perf_counter() - started) * 1000, 3)
        report = RunReport.from_outcomes(outcomes, duration_ms=duration_ms)
        logger.info(
            "Run %s finished in %.1fms: %d passed, %d failed",
            report.run_id,
            duration_ms,
            report.passed_count,
            report.failed_count,
        )
        return report

    def execute_sync(self, context: Optional[Mapping[str, Any]] = None) -> RunReport:
        return asyncio.run(self.execute(context))

    async def _invoke(self, check: Check, ctx: ValidationContext) -> CheckOutcome:
        try:
            result = check.evaluate(ctx)
            if inspect.isawaitable(result):
                if self.check_timeout is None:
                    result = await result
                else:
                    loop = asyncio.get_running_loop()
                    deadline = loop.time() + self.check_timeout
                    try:
                        result = await asyncio.wait_for(result, timeout=self.check_timeout)
                    except asyncio.TimeoutError:
                        # A TimeoutError raised by the check itself is a fault, not a timeout.
                        if loop.time() + _CLOCK_RESOLUTION < deadline:
                            raise
                        return self._timeout_outcome(check)
            if not isinstance(result, CheckOutcome):
                raise TypeError(
                    f"{check.name}.evaluate() returned {type(result).__name__}, expected CheckOutcome"
                )
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            return self._fault_outcome(check, exc, phase="evaluate")

        logger.debug("Check %s %s: %s", check.name, "passed" if result.passed else "failed", result.message)
        return result

    def _timeout_outcome(self, check: Check) -> CheckOutcome:
        logger.warning("Check %s timed out after %ss", check.name, self.check_timeout)
        return CheckOutcome(
            check_name=check.name,
            passed=False,
            message=f"Check timed out after {self.check_timeout}s",
            details={"error": "timeout", "error_type": "TimeoutError", "timeout_s": self.check_timeout},
        )

    @staticmethod
    def _fault_outcome(check: Check, exc: BaseException, *, phase: str) -> CheckOutcome:
        logger.warning("Check %s raised during %s", check.name, phase, exc_info=exc)
        return CheckOutcome(
            check_name=check.name,
            passed=False,
            message=f"Check failed with error: {exc}",
            details={
                "error": repr(exc),
                "error_type": type(exc).__name__,
                "phase": phase,
                "traceback": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
            },
        )
