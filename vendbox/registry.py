from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import structlog
import yaml

MODULES_PATH = Path(__file__).parent.parent / "modules"

logger = structlog.get_logger(__name__)


def _mount_from(name: str, raw: Any) -> str:
    mount = str(raw or "").strip() or f"/{name.replace('_', '-')}"
    if not mount.startswith("/"):
        mount = "/" + mount
    if mount != "/" and mount.endswith("/"):
        mount = mount.rstrip("/")
    return mount


def _normalize_module(data: Dict[str, Any], *, path: Path) -> Dict[str, Any] | None:
    name = data.get("name")
    if not name:
        return None

    slug = data.get("slug") or name.replace("_", "-")
    public = data.get("public")
    if public is None:
        public = True

    normalized = {**data}
    normalized.update(
        {
            "name": name,
            "slug": slug,
            "mount": _mount_from(slug, data.get("mount")),
            "public": bool(public),
            "path": path,
        }
    )
    return normalized


def read_manifest(module_dir: Path) -> Dict[str, Any] | None:
    manifest = module_dir / "module.yaml"
    if not manifest.exists():
        return None
    with open(manifest, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{manifest}: module.yaml must be a mapping")
    return data


def load_modules(modules_path: Path = MODULES_PATH) -> Dict[str, Dict[str, Any]]:
    modules: Dict[str, Dict[str, Any]] = {}
    if not modules_path.exists():
        return modules

    for module_dir in sorted(modules_path.iterdir()):
        if not module_dir.is_dir():
            continue
        data = read_manifest(module_dir)
        if data is None:
            continue
        normalized = _normalize_module(data, path=module_dir)
        if normalized is None:
            logger.warning("registry.manifest_without_name", module=module_dir.name)
            continue
        modules[normalized["name"]] = normalized
    return modules
