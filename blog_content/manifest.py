from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Any, Dict
import json
import mimetypes

from .config import SiteConfig


def _public_url(icon: str) -> str:
    # Files under public/ are served from the site root.
    parts = PurePosixPath(icon).parts
    if parts and parts[0] == "public":
        parts = parts[1:]
    return "/" + "/".join(parts)


def build_manifest(site: SiteConfig) -> Dict[str, Any]:
    icon_type = mimetypes.guess_type(site.icon)[0] or "image/png"
    return {
        "name": site.title,
        "description": site.description,
        "start_url": site.start_url,
        "display": site.display,
        "theme_color": site.theme_color,
        "background_color": site.background_color,
        "icons": [
            {
                "src": _public_url(site.icon),
                "type": icon_type,
                "sizes": "any",
            }
        ],
    }


def write_manifest(site: SiteConfig, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(build_manifest(site), f, indent=2, ensure_ascii=False)
        f.write("\n")
    return path
