from .code_quality import CodeQualityCheck
from .compliance import ComplianceCheck
from .documentation import DocumentationCheck
from .performance import PerformanceCheck
from .security import SecurityCheck

__all__ = [
    "CodeQualityCheck",
    "SecurityCheck",
    "PerformanceCheck",
    "DocumentationCheck",
    "ComplianceCheck",
]
