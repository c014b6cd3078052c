from __future__ import annotations

from urllib.parse import urlencode, urlsplit, urlunsplit

from .config import SiteConfig


def share(url: str, type: str, term: str, site: SiteConfig) -> str:
    """Append the site's UTM campaign parameters to ``url`` for a share button."""

    query = urlencode(
        [
            ("utm_campaign", site.utm_campaign),
            ("utm_medium", site.utm_medium),
            ("utm_source", site.utm_source),
            ("utm_type", type),
            ("utm_term", term),
        ]
    )
    parts = urlsplit(url)
    if parts.query:
        query = f"{parts.query}&{query}"
    return urlunsplit(parts._replace(query=query))
