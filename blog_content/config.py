from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError

DEFAULT_SITE_URL = "https://www.juststeveking.uk"
ARTICLES_PREFIX = "/articles"


@dataclass(frozen=True)
class SiteConfig:
    """Site-wide settings used when publishing feeds, manifests and share links."""

    site: str = DEFAULT_SITE_URL
    title: str = "JustSteveKing"
    description: str = (
        "Welcome to my website, the realm of the API Guy. Led by a seasoned "
        "Consultant CTO, Software Engineer, Developer Advocate, and renowned "
        "Conference Speaker."
    )
    language: str = "en-us"
    twitter_handle: str = "@JustSteveKing"

    utm_campaign: str = "juststeveking"
    utm_source: str = "juststeveking.uk"
    utm_medium: str = ""

    icon: str = "public/favicon.svg"
    theme_color: str = "#2dd4bf"
    background_color: str = "#fafafa"
    display: str = "standalone"
    start_url: str = "/"

    def article_url(self, slug: str) -> str:
        return f"{self.site.rstrip('/')}{ARTICLES_PREFIX}/{slug}/"


def load_site_config(
    path: Optional[Path] = None, **overrides: Optional[str]
) -> SiteConfig:
    """
    Build a SiteConfig from defaults, an optional YAML file, then keyword overrides.

    Overrides whose value is None are ignored so argparse defaults can be passed straight through.
    """
    config = SiteConfig()
    known = {f.name for f in fields(SiteConfig)}

    if path is not None:
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise ConfigError(f"cannot read config {path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid YAML in {path}: {exc}") from exc

        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ConfigError(f"{path}: top level must be a mapping")

        config = replace(config, **_checked(raw, known, str(path)))

    extra = {k: v for k, v in overrides.items() if v is not None}
    if extra:
        config = replace(config, **_checked(extra, known, "overrides"))
    return config


def _checked(values: Dict[str, Any], known: set[str], where: str) -> Dict[str, str]:
    bad_keys = sorted(repr(k) for k in values if not isinstance(k, str))
    if bad_keys:
        raise ConfigError(f"{where}: setting names must be strings, got {', '.join(bad_keys)}")

    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigError(f"{where}: unknown setting(s): {', '.join(unknown)}")

    checked: Dict[str, str] = {}
    for key, value in values.items():
        if value is None:
            value = ""
        if not isinstance(value, (str, int, float)):
            raise ConfigError(f"{where}: {key} must be a string")
        checked[key] = str(value)
    return checked
