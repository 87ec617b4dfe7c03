from __future__ import annotations

import json
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional

import yaml


class ValidationContext(Mapping[str, Any]):
    """Read-only key/value bag describing the system under evaluation.

    There is no fixed schema. Checks read the keys they understand and treat a
    missing key as "not applicable".
    """

    __slots__ = ("_values",)

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self._values = MappingProxyType(dict(values or {}))

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ValidationContext({dict(self._values)!r})"

    def has(self, key: str) -> bool:
        """True when the key is present and not None."""
        return self._values.get(key) is not None

    @classmethod
    def coerce(cls, context: Optional[Mapping[str, Any]]) -> "ValidationContext":
        if isinstance(context, cls):
            return context
        return cls(context)

    @classmethod
    def from_file(cls, path: Path) -> "ValidationContext":
        text = Path(path).read_text()
        if Path(path).suffix.lower() in (".yml", ".yaml"):
            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError(f"Context file {path} must contain a mapping at the top level")
        return cls(data)


# Used by the CLI when no context file is supplied.
SAMPLE_CONTEXT: Mapping[str, Any] = MappingProxyType(
    {
        "coverage": 85,
        "complexity": 8,
        "protocol": "https",
        "vulnerabilities": [],
        "has_secrets": False,
        "response_time": 450,
        "memory_usage": 200,
        "has_readme": True,
        "has_api_docs": True,
        "doc_coverage": 85,
        "has_license": True,
        "standards": ["ISO-27001", "SOC-2", "GDPR"],
        "has_audit_logs": True,
    }
)
