from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence


def _ensure_backend_on_path() -> None:
    backend_dir = Path(__file__).resolve().parents[1]
    if str(backend_dir) not in sys.path:
        sys.path.insert(0, str(backend_dir))


_ensure_backend_on_path()

from pydantic import PositiveInt  # noqa: E402

from common.validation_engine.check import Check  # noqa: E402
from common.validation_engine.config import CheckConfig  # noqa: E402
from common.validation_engine.models import CheckOutcome  # noqa: E402
from common.validation_engine.reporting import RENDERERS, render  # noqa: E402
from common.validation_engine.runner import CheckRunner  # noqa: E402

# Checks defined outside the engine are plain Check subclasses; they are not
# added to the built-in registry, so stages and the catalog never see them.


class DatabaseConfig(CheckConfig):
    require_backups: bool = True
    max_connections: PositiveInt = 100


class DatabaseCheck(Check):
    name = "Database"
    description = "Backups configured and connection count under the ceiling"
    config_model = DatabaseConfig

    async def evaluate(self, context: Mapping[str, Any]) -> CheckOutcome:
        cfg = self.config
        active = context.get("active_connections")
        issues = []
        if cfg.require_backups and not context.get("has_backups"):
            issues.append("Database backups are not configured")
        if active is not None and active > cfg.max_connections:
            issues.append(f"Active connections ({active}) exceed maximum ({cfg.max_connections})")
        return self.outcome_from_issues("Database", issues, active_connections=active)


class ApiConfig(CheckConfig):
    require_versioning: bool = True
    require_rate_limiting: bool = True


class ApiCheck(Check):
    name = "API"
    description = "Versioned endpoints and rate limiting"
    config_model = ApiConfig

    async def evaluate(self, context: Mapping[str, Any]) -> CheckOutcome:
        cfg = self.config
        issues = []
        if cfg.require_versioning and not context.get("has_api_versioning"):
            issues.append("API versioning is not implemented")
        if cfg.require_rate_limiting and not context.get("has_rate_limiting"):
            issues.append("Rate limiting is not implemented")
        return self.outcome_from_issues("API", issues)


HEALTHY_CONTEXT = {
    "has_backups": True,
    "active_connections": 35,
    "has_api_versioning": True,
    "has_rate_limiting": True,
}

FAILING_CONTEXT = {
    "has_backups": False,
    "active_connections": 80,
    "has_api_versioning": True,
    "has_rate_limiting": False,
}


def build_runner() -> CheckRunner:
    return CheckRunner(
        [DatabaseCheck(max_connections=50), ApiCheck()],
        concurrent=True,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Run two custom checks concurrently and print the report.")
    parser.add_argument("--failing", action="store_true", help="Use a context that violates both checks.")
    parser.add_argument("--format", default="markdown", choices=list(RENDERERS), help="Report format.")
    args = parser.parse_args(argv)

    context = FAILING_CONTEXT if args.failing else HEALTHY_CONTEXT
    report = build_runner().execute_sync(context)
    print(render(report, args.format))

    failures = report.get_failures()
    if failures:
        print(f"\n{len(failures)} check(s) failed:", file=sys.stderr)
        for index, failure in enumerate(failures, start=1):
            print(f"{index}. {failure.check_name}", file=sys.stderr)
            for issue in failure.issues:
                print(f"   - {issue}", file=sys.stderr)

    return 0 if report.passed else 1


if __name__ == "__main__":
    raise SystemExit(main())
