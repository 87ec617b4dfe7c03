from __future__ import annotations

from typing import Any, Mapping

from ..check import Check
from ..config import SecurityConfig
from ..models import CheckOutcome
from ..registry import register_check


def _vulnerability_severity(vuln: Any) -> str:
    if isinstance(vuln, Mapping):
        value = vuln.get("severity", "")
    else:
        value = getattr(vuln, "severity", "")
    return str(value or "").lower()


@register_check
class SecurityCheck(Check):
    name = "Security"
    description = "HTTPS, critical dependency vulnerabilities and leaked secrets"
    config_model = SecurityConfig

    async def evaluate(self, context: Mapping[str, Any]) -> CheckOutcome:
        cfg = self.config
        issues = []

        # Only an explicit plain-HTTP protocol fails; an unknown protocol is not judged.
        protocol = context.get("protocol")
        if cfg.require_https and protocol and str(protocol).lower() == "http":
            issues.append("HTTPS is required but HTTP protocol detected")

        vulnerabilities = context.get("vulnerabilities")
        if cfg.check_dependencies and vulnerabilities:
            critical = [v for v in vulnerabilities if _vulnerability_severity(v) == "critical"]
            if critical:
                issues.append(f"{len(critical)} critical vulnerabilities found in dependencies")

        if context.get("has_secrets"):
            issues.append("Secrets or sensitive data detected in code")

        return self.outcome_from_issues(
            "Security",
            issues,
            require_https=cfg.require_https,
            check_dependencies=cfg.check_dependencies,
            protocol=protocol,
        )
