from __future__ import annotations

import argparse
import json
from typing import Any, Dict, List

import yaml
from pydantic import BaseModel

from .registry import check_registry

# Ensure built-in checks are imported/registered when generating a catalog.
from . import checks as _builtin_checks  # noqa: F401


class CheckCatalogEntry(BaseModel):
    name: str
    description: str = ""

    module: str
    class_name: str

    config_model: str
    config_schema: Dict[str, Any]


def build_catalog() -> List[CheckCatalogEntry]:
    entries: List[CheckCatalogEntry] = []
    for name in check_registry.names():
        check_cls = check_registry.get(name)
        cfg_model = check_cls.config_model
        entries.append(
            CheckCatalogEntry(
                name=name,
                description=check_cls.description,
                module=check_cls.__module__,
                class_name=check_cls.__name__,
                config_model=cfg_model.__name__,
                config_schema=cfg_model.model_json_schema(),
            )
        )

    entries.sort(key=lambda e: e.name)
    return entries


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="List the registered checks and their configuration schemas.")
    parser.add_argument(
        "--format",
        choices=("yaml", "json"),
        default="yaml",
        help="Output format (default: yaml).",
    )
    args = parser.parse_args(argv)

    catalog = [e.model_dump() for e in build_catalog()]
    if args.format == "json":
        print(json.dumps(catalog, indent=2, sort_keys=True))
    else:
        print(yaml.safe_dump(catalog, sort_keys=True))


if __name__ == "__main__":
    main()
