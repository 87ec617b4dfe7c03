from __future__ import annotations

from ..checks import (
    CodeQualityCheck,
    ComplianceCheck,
    DocumentationCheck,
    PerformanceCheck,
    SecurityCheck,
)
from .base import Stage, register_stage


@register_stage
class EnterpriseStage(Stage):
    name = "enterprise"
    description = "Enterprise-grade validation stage"
    requirements = (
        "Highest code quality (90% coverage)",
        "Strictest security requirements",
        "Optimal performance (500ms response, 256MB memory)",
        "Complete documentation (90% coverage)",
        "Full compliance (ISO-27001, SOC-2, GDPR)",
    )

    def check_presets(self):
        return [
            (CodeQualityCheck, {"min_coverage": 90, "max_complexity": 8}),
            (SecurityCheck, {"require_https": True, "check_dependencies": True}),
            (PerformanceCheck, {"max_response_time": 500, "max_memory_usage": 256}),
            (DocumentationCheck, {"require_readme": True, "require_api_docs": True, "min_doc_coverage": 90}),
            (ComplianceCheck, {"require_license": True, "standards": ["ISO-27001", "SOC-2", "GDPR"]}),
        ]
