from __future__ import annotations

from typing import Any, Mapping

from ..check import Check, format_number
from ..config import DocumentationConfig
from ..models import CheckOutcome
from ..registry import register_check


@register_check
class DocumentationCheck(Check):
    name = "Documentation"
    description = "README, API docs and documentation coverage"
    config_model = DocumentationConfig

    async def evaluate(self, context: Mapping[str, Any]) -> CheckOutcome:
        cfg = self.config
        doc_coverage = context.get("doc_coverage")
        issues = []

        if cfg.require_readme and not context.get("has_readme"):
            issues.append("README.md file is required")
        if cfg.require_api_docs and not context.get("has_api_docs"):
            issues.append("API documentation is required")
        if doc_coverage is not None and doc_coverage < cfg.min_doc_coverage:
            issues.append(
                f"Documentation coverage {format_number(doc_coverage)}% is below minimum "
                f"{format_number(cfg.min_doc_coverage)}%"
            )

        return self.outcome_from_issues(
            "Documentation",
            issues,
            has_readme=context.get("has_readme"),
            has_api_docs=context.get("has_api_docs"),
            doc_coverage=doc_coverage,
        )
