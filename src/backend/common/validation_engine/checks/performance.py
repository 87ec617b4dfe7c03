from __future__ import annotations

from typing import Any, Mapping

from ..check import Check, format_number
from ..config import PerformanceConfig
from ..models import CheckOutcome
from ..registry import register_check


@register_check
class PerformanceCheck(Check):
    name = "Performance"
    description = "Response time (ms) and memory usage (MB) ceilings"
    config_model = PerformanceConfig

    async def evaluate(self, context: Mapping[str, Any]) -> CheckOutcome:
        cfg = self.config
        response_time = context.get("response_time")
        memory_usage = context.get("memory_usage")
        issues = []

        if response_time is not None and response_time > cfg.max_response_time:
            issues.append(
                f"Response time {format_number(response_time)}ms exceeds maximum "
                f"{format_number(cfg.max_response_time)}ms"
            )
        if memory_usage is not None and memory_usage > cfg.max_memory_usage:
            issues.append(
                f"Memory usage {format_number(memory_usage)}MB exceeds maximum "
                f"{format_number(cfg.max_memory_usage)}MB"
            )

        return self.outcome_from_issues(
            "Performance",
            issues,
            response_time=response_time,
            memory_usage=memory_usage,
        )
