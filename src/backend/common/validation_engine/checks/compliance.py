from __future__ import annotations

from typing import Any, Mapping

from ..check import Check
from ..config import ComplianceConfig
from ..models import CheckOutcome
from ..registry import register_check


@register_check
class ComplianceCheck(Check):
    name = "Compliance"
    description = "License file, required standards and audit logging"
    config_model = ComplianceConfig

    async def evaluate(self, context: Mapping[str, Any]) -> CheckOutcome:
        cfg = self.config
        issues = []

        if cfg.require_license and not context.get("has_license"):
            issues.append("LICENSE file is required")

        # Standards are only judged when the context reports which ones are met.
        met = context.get("standards")
        if met is not None:
            for standard in cfg.standards:
                if standard not in met:
                    issues.append(f"Non-compliant with {standard} standard")

        audit_required = cfg.require_audit_logs or bool(context.get("require_audit_logs"))
        if audit_required and not context.get("has_audit_logs"):
            issues.append("Audit logging is required but not implemented")

        return self.outcome_from_issues(
            "Compliance",
            issues,
            has_license=context.get("has_license"),
            standards=list(cfg.standards),
        )
