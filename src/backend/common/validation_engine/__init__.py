"""Pluggable check engine for deployment readiness.

Checks are predicates over a caller-supplied context; the runner executes them
sequentially or concurrently and aggregates a report. Nothing here performs
network I/O or computes the context itself.
"""

from .check import Check
from .context import ValidationContext
from .models import (
    CheckMetadata,
    CheckOutcome,
    RunReport,
    RunSummary,
    Severity,
    StageMetadata,
)
from .runner import CheckRunner

# Import built-in checks and stages so they self-register.
from . import checks as _builtin_checks  # noqa: F401
from . import stages as _builtin_stages  # noqa: F401
