from datetime import date, datetime, timezone
from pathlib import Path

from lxml import etree

from blog_content.config import SiteConfig
from blog_content.content import load_collection
from blog_content.feed import build_rss, rfc822
from blog_content.types import Post

NOW = datetime(2024, 1, 1, 8, 30, tzinfo=timezone.utc)


def test_rfc822_uses_midnight_utc_for_dates():
    assert rfc822(date(2023, 5, 12)) == "Fri, 12 May 2023 00:00:00 GMT"


def test_feed_channel_and_items(posts_dir: Path):
    posts = load_collection(posts_dir, "posts")

    xml = build_rss(posts, SiteConfig(), now=NOW)
    root = etree.fromstring(xml)

    assert xml.startswith(b"<?xml version='1.0' encoding='UTF-8'?>")
    assert root.tag == "rss"
    assert root.get("version") == "2.0"
    channel = root.find("channel")
    assert channel.findtext("title") == "JustSteveKing"
    assert channel.findtext("link") == "https://www.juststeveking.uk/"
    assert channel.findtext("language") == "en-us"
    assert channel.findtext("lastBuildDate") == "Mon, 01 Jan 2024 08:30:00 GMT"

    items = channel.findall("item")
    assert [i.findtext("title") for i in items] == [
        "Tips for building a PHP SDK",
        "API Versioning",
        "Laravel and Docker",
    ]
    first = items[0]
    assert first.findtext("link") == "https://www.juststeveking.uk/articles/php-sdk-tips/"
    assert first.find("guid").get("isPermaLink") == "true"
    assert first.findtext("pubDate") == "Fri, 12 May 2023 00:00:00 GMT"
    assert first.findtext("description").startswith("A few lessons")


def test_feed_escapes_text_and_respects_site_override():
    post = Post(
        title="Generics <T> & you",
        description="Using <b>types</b>",
        pub_date=date(2021, 6, 1),
        slug="generics",
    )

    xml = build_rss([post], SiteConfig(site="https://example.com/"), now=NOW)
    item = etree.fromstring(xml).find("channel/item")

    assert b"&lt;T&gt; &amp; you" in xml
    assert item.findtext("title") == "Generics <T> & you"
    assert item.findtext("link") == "https://example.com/articles/generics/"


def test_empty_feed_has_channel_only():
    root = etree.fromstring(build_rss([], SiteConfig(), now=NOW))

    assert root.find("channel/item") is None
