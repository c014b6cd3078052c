from __future__ import annotations

from datetime import date, datetime, time, timezone
from email.utils import format_datetime
from typing import Iterable, Optional

from lxml import etree

from .config import SiteConfig
from .content import sort_posts
from .types import Post


def rfc822(day: date | datetime) -> str:
    if not isinstance(day, datetime):
        day = datetime.combine(day, time.min)
    if day.tzinfo is None:
        day = day.replace(tzinfo=timezone.utc)
    return format_datetime(day.astimezone(timezone.utc), usegmt=True)


def _text(parent: etree._Element, tag: str, value: str) -> etree._Element:
    child = etree.SubElement(parent, tag)
    child.text = value
    return child


def build_rss(
    posts: Iterable[Post], site: SiteConfig, now: Optional[datetime] = None
) -> bytes:
    """Render the posts as an RSS 2.0 document, newest first, linking to /articles/<slug>/."""

    now = now or datetime.now(timezone.utc)

    rss = etree.Element("rss", version="2.0")
    channel = etree.SubElement(rss, "channel")
    _text(channel, "title", site.title)
    _text(channel, "description", site.description)
    _text(channel, "link", site.site.rstrip("/") + "/")
    _text(channel, "language", site.language)
    _text(channel, "lastBuildDate", rfc822(now))

    for post in sort_posts(posts, order="desc"):
        url = site.article_url(post.slug)
        item = etree.SubElement(channel, "item")
        _text(item, "title", post.title)
        _text(item, "link", url)
        _text(item, "guid", url).set("isPermaLink", "true")
        _text(item, "description", post.description)
        _text(item, "pubDate", rfc822(post.pub_date))

    return etree.tostring(
        rss, xml_declaration=True, encoding="UTF-8", pretty_print=True
    )
