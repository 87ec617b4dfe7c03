from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_core import to_jsonable_python


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Severity(str, Enum):
    # Informational tag only; pass/fail never reads it.
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class CheckOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    check_name: str
    passed: bool
    message: str = ""
    details: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=_utcnow)

    @field_validator("details")
    @classmethod
    def _json_safe_details(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        # Values with no JSON form are kept as their repr.
        return to_jsonable_python(value, fallback=repr)

    @property
    def issues(self) -> List[str]:
        raw = self.details.get("issues") or []
        return [str(issue) for issue in raw]


class CheckMetadata(BaseModel):
    name: str
    severity: Severity
    enabled: bool
    parameters: Dict[str, Any] = Field(default_factory=dict)


class StageMetadata(BaseModel):
    name: str
    description: str = ""
    requirements: List[str] = Field(default_factory=list)


class RunSummary(BaseModel):
    passed: bool
    total: int
    passed_count: int
    failed_count: int
    duration_ms: float
    timestamp: datetime


class RunReport(BaseModel):
    """Aggregate of every outcome produced by one runner execution.

    Counts are fixed when the report is built. Use `from_outcomes` rather than
    passing them by hand; a report whose counts disagree with its outcomes is
    rejected.
    """

    model_config = ConfigDict(frozen=True)

    run_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    generated_at: datetime = Field(default_factory=_utcnow)
    duration_ms: float = 0.0

    outcomes: Tuple[CheckOutcome, ...] = ()
    passed: bool = True
    total: int = 0
    passed_count: int = 0
    failed_count: int = 0

    @classmethod
    def from_outcomes(cls, outcomes: Iterable[CheckOutcome], *, duration_ms: float = 0.0) -> "RunReport":
        items = tuple(outcomes)
        passed_count = sum(1 for o in items if o.passed)
        return cls(
            duration_ms=duration_ms,
            outcomes=items,
            passed=passed_count == len(items),
            total=len(items),
            passed_count=passed_count,
            failed_count=len(items) - passed_count,
        )

    @model_validator(mode="after")
    def _counts_match_outcomes(self) -> "RunReport":
        passed_count = sum(1 for o in self.outcomes if o.passed)
        expected = (len(self.outcomes), passed_count, len(self.outcomes) - passed_count)
        if (self.total, self.passed_count, self.failed_count) != expected:
            raise ValueError(
                f"Report counts {self.total}/{self.passed_count}/{self.failed_count} "
                f"do not match outcomes {expected[0]}/{expected[1]}/{expected[2]}"
            )
        if self.passed != (passed_count == len(self.outcomes)):
            raise ValueError("Report passed flag does not match outcomes")
        return self

    def summary(self) -> RunSummary:
        return RunSummary(
            passed=self.passed,
            total=self.total,
            passed_count=self.passed_count,
            failed_count=self.failed_count,
            duration_ms=self.duration_ms,
            timestamp=self.generated_at,
        )

    def get_failures(self) -> List[CheckOutcome]:
        return [o for o in self.outcomes if not o.passed]

    def to_serializable(self) -> Dict[str, Any]:
        # Interchange structure consumed by every renderer.
        return {
            "run_id": self.run_id,
            "summary": self.summary().model_dump(mode="json"),
            "outcomes": [o.model_dump(mode="json") for o in self.outcomes],
        }

    @classmethod
    def from_serializable(cls, data: Dict[str, Any]) -> "RunReport":
        summary = data.get("summary", {})
        return cls.model_validate(
            {
                "run_id": data.get("run_id") or str(uuid.uuid4()),
                "generated_at": summary.get("timestamp") or _utcnow(),
                "duration_ms": summary.get("duration_ms", 0.0),
                "outcomes": data.get("outcomes", []),
                "passed": summary.get("passed", True),
                "total": summary.get("total", 0),
                "passed_count": summary.get("passed_count", 0),
                "failed_count": summary.get("failed_count", 0),
            }
        )
