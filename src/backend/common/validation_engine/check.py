from __future__ import annotations

from typing import Any, Awaitable, Dict, Mapping, Optional, Sequence, Type, Union

from .config import CheckConfig
from .models import CheckMetadata, CheckOutcome, Severity

_BASE_CONFIG_FIELDS = frozenset(CheckConfig.model_fields)


class Check:
    """A named rule evaluated against a context.

    Subclasses set `name` and `config_model` and implement `evaluate`, either as a
    coroutine or a plain function. Predictable violations are reported with a
    failing outcome; raising is reserved for genuine faults, which the runner
    converts into a failing outcome for this check.
    """

    name: str = ""
    description: str = ""
    config_model: Type[CheckConfig] = CheckConfig

    def __init__(
        self,
        config: Union[CheckConfig, Mapping[str, Any], None] = None,
        *,
        name: Optional[str] = None,
        **overrides: Any,
    ):
        if name is not None:
            self.name = name
        if not self.name:
            raise ValueError(f"{type(self).__name__} must define a name")

        if isinstance(config, CheckConfig):
            raw = config.model_dump()
        else:
            raw = dict(config or {})
        raw.update(overrides)
        self.config = self.config_model.model_validate(raw)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, enabled={self.enabled})"

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    @property
    def severity(self) -> Severity:
        return self.config.severity

    @property
    def parameters(self) -> Dict[str, Any]:
        return self.config.model_dump(exclude=set(_BASE_CONFIG_FIELDS))

    def evaluate(self, context: Mapping[str, Any]) -> Union[CheckOutcome, Awaitable[CheckOutcome]]:
        raise NotImplementedError(f"evaluate() must be implemented by {self.name}")

    def should_run(self, context: Mapping[str, Any]) -> bool:
        return self.enabled

    def describe_metadata(self) -> CheckMetadata:
        return CheckMetadata(
            name=self.name,
            severity=self.severity,
            enabled=self.enabled,
            parameters=self.parameters,
        )

    def outcome(self, passed: bool, message: str = "", details: Optional[Dict[str, Any]] = None) -> CheckOutcome:
        return CheckOutcome(check_name=self.name, passed=passed, message=message, details=details or {})

    def outcome_from_issues(self, label: str, issues: Sequence[str], **echo: Any) -> CheckOutcome:
        passed = not issues
        if passed:
            message = f"{label} checks passed"
        else:
            message = f"{label} issues found: {', '.join(issues)}"
        return self.outcome(passed, message, {"issues": list(issues), **echo})


def format_number(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)
