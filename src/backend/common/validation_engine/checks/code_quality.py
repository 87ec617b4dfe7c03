from __future__ import annotations

from typing import Any, Mapping

from ..check import Check, format_number
from ..config import CodeQualityConfig
from ..models import CheckOutcome
from ..registry import register_check


@register_check
class CodeQualityCheck(Check):
    name = "CodeQuality"
    description = "Test coverage and code complexity thresholds"
    config_model = CodeQualityConfig

    async def evaluate(self, context: Mapping[str, Any]) -> CheckOutcome:
        cfg = self.config
        coverage = context.get("coverage")
        complexity = context.get("complexity")
        issues = []

        if coverage is not None and coverage < cfg.min_coverage:
            issues.append(
                f"Test coverage {format_number(coverage)}% is below minimum {format_number(cfg.min_coverage)}%"
            )
        if complexity is not None and complexity > cfg.max_complexity:
            issues.append(
                f"Code complexity {format_number(complexity)} exceeds maximum {format_number(cfg.max_complexity)}"
            )

        return self.outcome_from_issues("Code quality", issues, coverage=coverage, complexity=complexity)
