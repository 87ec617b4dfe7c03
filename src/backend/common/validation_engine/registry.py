from __future__ import annotations

from typing import Dict, Generic, Iterable, Type, TypeVar

from .check import Check

T = TypeVar("T")


class Registry(Generic[T]):
    def __init__(self, kind: str):
        self._kind = kind
        self._entries: Dict[str, Type[T]] = {}

    def register(self, cls: Type[T]) -> None:
        name = getattr(cls, "name", None)
        if not name:
            raise ValueError(f"{self._kind} class missing name")
        key = name.lower()
        if key in self._entries:
            raise ValueError(f"Duplicate {self._kind} registered: {name}")
        self._entries[key] = cls

    def get(self, name: str) -> Type[T]:
        key = (name or "").strip().lower()
        if key not in self._entries:
            valid = ", ".join(self.names())
            raise KeyError(f"Unknown {self._kind} '{name}' (valid: {valid})")
        return self._entries[key]

    def names(self) -> Iterable[str]:
        return [cls.name for cls in self._entries.values()]  # type: ignore[attr-defined]

    def __contains__(self, name: str) -> bool:
        return (name or "").strip().lower() in self._entries


check_registry: Registry[Check] = Registry("check")


def register_check(check_cls: Type[Check]) -> Type[Check]:
    check_registry.register(check_cls)
    return check_cls
