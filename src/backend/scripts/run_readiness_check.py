from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence


def _ensure_backend_on_path() -> None:
    backend_dir = Path(__file__).resolve().parents[1]
    if str(backend_dir) not in sys.path:
        sys.path.insert(0, str(backend_dir))


_ensure_backend_on_path()

from dotenv import load_dotenv  # noqa: E402
from pydantic import ValidationError  # noqa: E402

from common.validation_engine.config import (  # noqa: E402
    RunnerSettings,
    ValidationConfig,
    build_runner,
    load_config,
)
from common.validation_engine.context import SAMPLE_CONTEXT, ValidationContext  # noqa: E402
from common.validation_engine.logging_config import setup_logging  # noqa: E402
from common.validation_engine.reporting import RENDERERS, render  # noqa: E402
from common.validation_engine.stages import get_stage, stage_registry  # noqa: E402

logger = logging.getLogger("common.validation_engine.cli")


def _print_stage_banner(stage) -> None:
    meta = stage.describe_metadata()
    print(f"Stage: {meta.name}", file=sys.stderr)
    print(f"Description: {meta.description}", file=sys.stderr)
    print("\nRequirements:", file=sys.stderr)
    for req in meta.requirements:
        print(f"  - {req}", file=sys.stderr)
    print("\n" + "=" * 60 + "\n", file=sys.stderr)


def _resolve_settings(args: argparse.Namespace, config: Optional[ValidationConfig], stage) -> RunnerSettings:
    base = (config.runner if config and config.runner else None) or stage.runner_settings
    updates = {}
    if args.concurrent:
        updates["concurrent"] = True
    if args.stop_on_first_failure:
        updates["stop_on_first_failure"] = True
    if args.check_timeout is not None:
        updates["check_timeout"] = args.check_timeout
    return RunnerSettings.model_validate({**base.model_dump(), **updates})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run a deployment readiness stage against a context and render the report."
    )
    parser.add_argument(
        "stage",
        nargs="?",
        default=None,
        help="Stage to run: mvp, production or enterprise (default: $READINESS_STAGE, config stage, or mvp).",
    )
    parser.add_argument(
        "format",
        nargs="?",
        default=None,
        help=f"Report format: {', '.join(RENDERERS)} (default: $READINESS_FORMAT, config format, or text).",
    )
    parser.add_argument("--context", default=None, help="Path to a JSON or YAML context file.")
    parser.add_argument("--config", default=None, help="Path to a JSON or YAML configuration file.")
    parser.add_argument("--output", default=None, help="Write the rendered report to this file instead of stdout.")
    parser.add_argument("--concurrent", action="store_true", help="Run checks concurrently.")
    parser.add_argument(
        "--stop-on-first-failure",
        action="store_true",
        help="Stop after the first failing check (sequential runs only).",
    )
    parser.add_argument("--check-timeout", type=float, default=None, help="Per-check timeout in seconds.")
    parser.add_argument("--log-level", default=None, help="Log level (default: $READINESS_LOG_LEVEL or WARNING).")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file.")
    parser.add_argument(
        "--no-banner",
        action="store_false",
        dest="show_banner",
        help="Do not print the stage metadata banner.",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    setup_logging(args.log_level or os.getenv("READINESS_LOG_LEVEL", "WARNING"), log_file=args.log_file)

    config = load_config(Path(args.config)) if args.config else None
    if config is not None:
        logger.info("Loaded configuration from %s", args.config)
    stage_name = args.stage or os.getenv("READINESS_STAGE") or (config.stage if config else "mvp")
    fmt = (
        args.format
        or os.getenv("READINESS_FORMAT")
        or (config.report.format if config else None)
        or "text"
    )
    output = args.output or (config.report.output_file if config else None)

    try:
        stage = get_stage(stage_name)
    except KeyError:
        print(f"Unknown stage: {stage_name}", file=sys.stderr)
        print(f"Valid stages: {', '.join(stage_registry.names())}", file=sys.stderr)
        return 1
    if fmt.strip().lower() not in RENDERERS:
        print(f"Unknown format: {fmt}", file=sys.stderr)
        print(f"Valid formats: {', '.join(RENDERERS)}", file=sys.stderr)
        return 1

    if args.show_banner:
        _print_stage_banner(stage)

    context = ValidationContext.from_file(Path(args.context)) if args.context else ValidationContext(SAMPLE_CONTEXT)
    run_config = (config or ValidationConfig()).model_copy(
        update={"stage": stage.name, "runner": _resolve_settings(args, config, stage)}
    )
    try:
        runner = build_runner(run_config)
    except (KeyError, ValidationError) as exc:
        # KeyError wraps its message in quotes.
        message = exc.args[0] if isinstance(exc, KeyError) and exc.args else exc
        print(f"Invalid check configuration: {message}", file=sys.stderr)
        return 1
    report = runner.execute_sync(context)
    rendered = render(report, fmt)

    if output:
        out_path = Path(output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(rendered)
        print(f"Wrote {out_path}", file=sys.stderr)
    else:
        print(rendered)

    return 0 if report.passed else 1


def cli() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    cli()
