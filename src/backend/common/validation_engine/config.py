from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, PositiveFloat

from .models import Severity


class CheckConfig(BaseModel):
    # Misspelled thresholds must fail loudly rather than fall back to defaults.
    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    # Display only; a failing outcome fails the report regardless of severity.
    severity: Severity = Severity.ERROR


class CodeQualityConfig(CheckConfig):
    min_coverage: float = 80
    max_complexity: float = 10


class SecurityConfig(CheckConfig):
    require_https: bool = True
    check_dependencies: bool = True


class PerformanceConfig(CheckConfig):
    # Milliseconds.
    max_response_time: float = 1000
    # Megabytes.
    max_memory_usage: float = 512


class DocumentationConfig(CheckConfig):
    require_readme: bool = True
    require_api_docs: bool = False
    min_doc_coverage: float = 70


class ComplianceConfig(CheckConfig):
    require_license: bool = True
    standards: List[str] = Field(default_factory=list)
    require_audit_logs: bool = False


class RunnerSettings(BaseModel):
    stop_on_first_failure: bool = False
    concurrent: bool = False
    # Seconds; None waits forever.
    check_timeout: Optional[PositiveFloat] = None


class ReportSettings(BaseModel):
    format: str = "text"
    output_file: Optional[str] = None


class ValidationConfig(BaseModel):
    """Project-level configuration for a readiness run.

    `checks` is keyed by check name; each section is validated against the
    check's own config model when the runner is built.
    """

    stage: str = "production"
    runner: Optional[RunnerSettings] = None
    checks: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    report: ReportSettings = Field(default_factory=ReportSettings)


def load_config(path: Path) -> ValidationConfig:
    path = Path(path)
    text = path.read_text()
    if path.suffix.lower() in (".yml", ".yaml"):
        raw = yaml.safe_load(text) or {}
    else:
        raw = json.loads(text)
    return ValidationConfig.model_validate(raw)


def build_runner(config: ValidationConfig):
    """Resolve the configured stage and apply per-check and runner overrides."""
    from .stages import get_stage

    stage = get_stage(config.stage)
    return stage.create_runner(overrides=config.checks, settings=config.runner)
