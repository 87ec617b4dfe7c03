from __future__ import annotations

from ..checks import CodeQualityCheck, DocumentationCheck, SecurityCheck
from ..models import Severity
from .base import Stage, register_stage


@register_stage
class MVPStage(Stage):
    name = "mvp"
    description = "Minimum Viable Product validation stage"
    requirements = (
        "Basic code quality (60% coverage)",
        "Security vulnerability checks",
        "README documentation",
    )

    def check_presets(self):
        return [
            (CodeQualityCheck, {"min_coverage": 60, "max_complexity": 15, "severity": Severity.WARNING}),
            # HTTPS is relaxed until production.
            (SecurityCheck, {"require_https": False, "check_dependencies": True, "severity": Severity.ERROR}),
            (
                DocumentationCheck,
                {
                    "require_readme": True,
                    "require_api_docs": False,
                    "min_doc_coverage": 50,
                    "severity": Severity.WARNING,
                },
            ),
        ]
