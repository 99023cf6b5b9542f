#!/usr/bin/env python3
from __future__ import annotations

from pathlib import Path
import sys

import yaml

REQUIRED_FIELDS = ("name", "title", "version", "description", "category")


def _mount_from(name: str, raw: str | None) -> str:
    mount = raw or f"/{name.replace('_', '-')}"
    if not mount.startswith("/"):
        mount = "/" + mount
    if mount != "/" and mount.endswith("/"):
        mount = mount.rstrip("/")
    return mount


def check_modules(modules_dir: Path) -> list[str]:
    errors: list[str] = []
    mounts: dict[str, str] = {}
    names: set[str] = set()

    for module_dir in sorted(modules_dir.iterdir()):
        if not module_dir.is_dir():
            continue
        manifest = module_dir / "module.yaml"
        if not manifest.exists():
            errors.append(f"{module_dir.name}: missing module.yaml")
            continue
        try:
            data = yaml.safe_load(manifest.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            errors.append(f"{module_dir.name}: invalid YAML ({exc})")
            continue

        name = str(data.get("name") or "").strip() or module_dir.name
        if name in names:
            errors.append(f"{module_dir.name}: duplicate name '{name}'")
        else:
            names.add(name)

        for field in REQUIRED_FIELDS:
            if not str(data.get(field) or "").strip():
                errors.append(f"{module_dir.name}: missing {field}")

        if not (module_dir / "core").is_dir():
            errors.append(f"{module_dir.name}: missing core/")

        public = data.get("public")
        if public is None:
            public = True
        if not public:
            continue

        entrypoints = data.get("entrypoints") or {}
        api = entrypoints.get("api") if isinstance(entrypoints, dict) else None
        if not api:
            errors.append(f"{module_dir.name}: missing entrypoints.api")
        elif ":" not in str(api):
            errors.append(f"{module_dir.name}: entrypoints.api must be module:app")
        if not (module_dir / "tool" / "app.py").exists():
            errors.append(f"{module_dir.name}: missing tool/app.py")
        if not (module_dir / "tool" / "templates" / "index.html").exists():
            errors.append(f"{module_dir.name}: missing tool/templates/index.html")

        mount = _mount_from(name, data.get("mount"))
        if mount == "/":
            errors.append(f"{module_dir.name}: mount '/' is reserved")
        if " " in mount:
            errors.append(f"{module_dir.name}: mount contains spaces")
        if mount in mounts:
            errors.append(
                f"{module_dir.name}: mount '{mount}' duplicates {mounts[mount]}"
            )
        else:
            mounts[mount] = name

    return errors


def main() -> int:
    root = Path(__file__).resolve().parents[1]
    errors = check_modules(root / "modules")
    if errors:
        print("Module sanity check failed:\n")
        for issue in errors:
            print(f"- {issue}")
        return 1

    print("Module sanity check passed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
