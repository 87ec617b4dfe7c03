from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Type

from ..check import Check
from ..config import RunnerSettings
from ..models import StageMetadata
from ..registry import Registry, check_registry
from ..runner import CheckRunner

CheckPreset = Tuple[Type[Check], Dict[str, Any]]


class Stage(ABC):
    """A named maturity level bundling preconfigured checks and runner policy."""

    name: str = ""
    description: str = ""
    requirements: Tuple[str, ...] = ()
    runner_settings: RunnerSettings = RunnerSettings()

    @abstractmethod
    def check_presets(self) -> Sequence[CheckPreset]:  # pragma: no cover
        raise NotImplementedError

    def create_runner(
        self,
        overrides: Optional[Mapping[str, Mapping[str, Any]]] = None,
        settings: Optional[RunnerSettings] = None,
    ) -> CheckRunner:
        """Build a runner loaded with this stage's checks.

        `overrides` is keyed by check name (case-insensitive) and merged over the
        preset values; a key naming a check outside this stage raises `KeyError`.
        `settings` replaces the stage's runner policy.
        """
        presets = self.check_presets()
        resolved = self._resolve_overrides(overrides or {}, [cls.name for cls, _ in presets])
        settings = settings or self.runner_settings
        checks = [check_cls({**preset, **resolved.get(check_cls.name, {})}) for check_cls, preset in presets]
        return CheckRunner(
            checks,
            stop_on_first_failure=settings.stop_on_first_failure,
            concurrent=settings.concurrent,
            check_timeout=settings.check_timeout,
        )

    def _resolve_overrides(
        self,
        overrides: Mapping[str, Mapping[str, Any]],
        stage_checks: Sequence[str],
    ) -> Dict[str, Mapping[str, Any]]:
        by_key = {name.lower(): name for name in stage_checks}
        resolved: Dict[str, Mapping[str, Any]] = {}
        for key, section in overrides.items():
            name = by_key.get(key.strip().lower())
            if name is None:
                if key not in check_registry:
                    raise KeyError(f"Unknown check '{key}' (valid: {', '.join(check_registry.names())})")
                raise KeyError(
                    f"Check '{key}' is not part of stage '{self.name}' (checks: {', '.join(stage_checks)})"
                )
            resolved[name] = section
        return resolved

    def describe_metadata(self) -> StageMetadata:
        return StageMetadata(name=self.name, description=self.description, requirements=list(self.requirements))


stage_registry: Registry[Stage] = Registry("stage")


def register_stage(stage_cls: Type[Stage]) -> Type[Stage]:
    stage_registry.register(stage_cls)
    return stage_cls


def get_stage(name: str) -> Stage:
    return stage_registry.get(name)()
