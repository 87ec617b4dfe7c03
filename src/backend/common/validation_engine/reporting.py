from __future__ import annotations

import html as html_lib
import json
from typing import Any, Callable, Dict, List

from .models import RunReport

BANNER = "=" * 60

_HTML_STYLE = """
    body { font-family: Arial, sans-serif; margin: 20px; background: #f5f5f5; }
    .container { max-width: 900px; margin: 0 auto; background: white; padding: 20px; border-radius: 8px; box-shadow: 0 2px 4px rgba(0,0,0,0.1); }
    h1 { color: #333; border-bottom: 3px solid #007bff; padding-bottom: 10px; }
    .summary { background: #f8f9fa; padding: 15px; border-radius: 5px; margin: 20px 0; }
    .summary-item { margin: 8px 0; }
    .status { font-size: 24px; font-weight: bold; padding: 10px; border-radius: 5px; text-align: center; margin: 20px 0; }
    .success { background: #d4edda; color: #155724; }
    .failure { background: #f8d7da; color: #721c24; }
    .outcome { margin: 20px 0; padding: 15px; border-left: 4px solid #007bff; background: #f8f9fa; border-radius: 5px; }
    .outcome.passed { border-left-color: #28a745; }
    .outcome.failed { border-left-color: #dc3545; }
    .outcome-header { font-size: 18px; font-weight: bold; margin-bottom: 10px; }
    .outcome-message { margin: 10px 0; color: #666; }
    .issues ul { margin: 5px 0; padding-left: 20px; }
    .issues li { color: #d9534f; margin: 5px 0; }
"""


def _status_label(passed: bool) -> str:
    return "✓ PASSED" if passed else "✗ FAILED"


def _icon(passed: bool) -> str:
    return "✓" if passed else "✗"


def _issues(outcome: Dict[str, Any]) -> List[str]:
    details = outcome.get("details") or {}
    issues = details.get("issues") if isinstance(details, dict) else None
    return [str(issue) for issue in issues or []]


def _summary_lines(summary: Dict[str, Any]) -> List[tuple[str, Any]]:
    return [
        ("Total Checks", summary["total"]),
        ("Passed", summary["passed_count"]),
        ("Failed", summary["failed_count"]),
        ("Duration", f"{summary['duration_ms']}ms"),
        ("Timestamp", summary["timestamp"]),
    ]


def render_text(report: RunReport) -> str:
    data = report.to_serializable()
    summary = data["summary"]
    lines = [BANNER, "VALIDATION REPORT", BANNER, "", f"Status: {_status_label(summary['passed'])}"]
    lines.extend(f"{label}: {value}" for label, value in _summary_lines(summary))
    lines.extend(["", BANNER, "RESULTS", BANNER])

    for outcome in data["outcomes"]:
        lines.append("")
        lines.append(f"{_icon(outcome['passed'])} {outcome['check_name']}")
        lines.append(f"  {outcome['message']}")
        issues = _issues(outcome)
        if issues:
            lines.append("  Issues:")
            lines.extend(f"    - {issue}" for issue in issues)

    lines.extend(["", BANNER])
    return "\n".join(lines)


def render_json(report: RunReport) -> str:
    return json.dumps(report.to_serializable(), indent=2)


def render_markdown(report: RunReport) -> str:
    data = report.to_serializable()
    summary = data["summary"]
    lines = [
        "# Validation Report",
        "",
        "## Summary",
        "",
        f"- **Status**: {_status_label(summary['passed'])}",
    ]
    lines.extend(f"- **{label}**: {value}" for label, value in _summary_lines(summary))
    lines.extend(["", "## Results", ""])

    for outcome in data["outcomes"]:
        lines.append(f"### {_icon(outcome['passed'])} {outcome['check_name']}")
        lines.append("")
        lines.append(outcome["message"])
        lines.append("")
        issues = _issues(outcome)
        if issues:
            lines.append("**Issues:**")
            lines.append("")
            lines.extend(f"- {issue}" for issue in issues)
            lines.append("")
    return "\n".join(lines)


def render_html(report: RunReport) -> str:
    def _escape(value: object) -> str:
        return html_lib.escape(str(value))

    data = report.to_serializable()
    summary = data["summary"]
    status_class = "success" if summary["passed"] else "failure"
    status_text = "PASSED" if summary["passed"] else "FAILED"

    summary_items = "".join(
        f"<div class='summary-item'><strong>{_escape(label)}:</strong> {_escape(value)}</div>"
        for label, value in _summary_lines(summary)
    )

    blocks: List[str] = []
    for outcome in data["outcomes"]:
        outcome_class = "passed" if outcome["passed"] else "failed"
        issues = _issues(outcome)
        issues_html = ""
        if issues:
            items = "".join(f"<li>{_escape(issue)}</li>" for issue in issues)
            issues_html = f"<div class='issues'><strong>Issues:</strong><ul>{items}</ul></div>"
        blocks.append(
            f"<div class='outcome {outcome_class}'>"
            f"<div class='outcome-header'>{_icon(outcome['passed'])} {_escape(outcome['check_name'])}</div>"
            f"<div class='outcome-message'>{_escape(outcome['message'])}</div>"
            f"{issues_html}"
            "</div>"
        )

    return (
        "<!DOCTYPE html>\n"
        "<html>\n<head>\n<meta charset='utf-8'>\n<title>Validation Report</title>\n"
        f"<style>{_HTML_STYLE}</style>\n</head>\n<body>\n"
        "<div class='container'>\n"
        "<h1>Validation Report</h1>\n"
        f"<div class='status {status_class}'>{status_text}</div>\n"
        f"<div class='summary'><h2>Summary</h2>{summary_items}</div>\n"
        "<h2>Results</h2>\n"
        + "\n".join(blocks)
        + "\n</div>\n</body>\n</html>\n"
    )


RENDERERS: Dict[str, Callable[[RunReport], str]] = {
    "text": render_text,
    "json": render_json,
    "markdown": render_markdown,
    "html": render_html,
}


def render(report: RunReport, fmt: str) -> str:
    key = (fmt or "").strip().lower()
    if key not in RENDERERS:
        raise ValueError(f"Unknown report format '{fmt}' (expected one of: {', '.join(RENDERERS)}).")
    return RENDERERS[key](report)
