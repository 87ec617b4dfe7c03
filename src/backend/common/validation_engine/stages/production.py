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
class ProductionStage(Stage):
    name = "production"
    description = "Production-ready validation stage"
    requirements = (
        "High code quality (80% coverage)",
        "Strict security (HTTPS required)",
        "Performance requirements met",
        "Comprehensive documentation",
        "License file required",
    )

    def check_presets(self):
        return [
            (CodeQualityCheck, {"min_coverage": 80, "max_complexity": 10}),
            (SecurityCheck, {"require_https": True, "check_dependencies": True}),
            (PerformanceCheck, {"max_response_time": 1000, "max_memory_usage": 512}),
            (DocumentationCheck, {"require_readme": True, "require_api_docs": True, "min_doc_coverage": 80}),
            (ComplianceCheck, {"require_license": True}),
        ]
