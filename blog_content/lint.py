from __future__ import annotations

from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple
from urllib.parse import urlparse
import re

import requests
from bs4 import BeautifulSoup

from .content import CONTENT_SUFFIXES, entry_id, iter_collection_files
from .errors import FrontMatterError
from .frontmatter import parse_date, split_front_matter
from .types import Issue

REQUIRED_FIELDS = ("title", "pubDate", "image", "description")
OPTIONAL_FIELDS = ("source", "partner", "slug")
FENCE_PATTERN = re.compile(r"^ {0,3}(`{3,}|~{3,})")
INDENTED_CODE_PATTERN = re.compile(r"^(?: {4}|\t)")
# a span may wrap lines but never crosses a paragraph break
INLINE_CODE_PATTERN = re.compile(r"(`+)(?:(?!\n[ \t]*\n).)+?\1", re.S)
MARKDOWN_LINK_PATTERN = re.compile(r"\]\((https?://[^)\s]+)")
USER_AGENT = "Mozilla/5.0 (compatible; blog-content link checker)"


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _is_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def split_code_fences(body: str) -> Tuple[str, bool]:
    """
    Return the body with fenced and indented code blocks removed, and whether every fence was closed.

    A fence closes on a line using the same character at least as long as the opener.
    An indented block starts after a blank line and runs while lines stay indented or blank.
    """
    kept: List[str] = []
    opener: Optional[str] = None
    indented = False
    previous_blank = True

    for line in body.split("\n"):
        match = FENCE_PATTERN.match(line)
        if opener is not None:
            if match and match.group(1)[0] == opener[0] and len(match.group(1)) >= len(opener):
                if not line.strip().strip(opener[0]):
                    opener = None
                    previous_blank = False
            continue

        blank = not line.strip()
        if INDENTED_CODE_PATTERN.match(line) and not blank and (previous_blank or indented):
            indented = True
            continue
        if indented and blank:
            continue
        indented = False

        if match:
            opener = match.group(1)
            continue
        kept.append(line)
        previous_blank = blank

    return "\n".join(kept), opener is None


def strip_code(body: str) -> Tuple[str, bool]:
    """Like split_code_fences, but also drops inline `code` spans so only prose is left."""

    prose, closed = split_code_fences(body)
    return INLINE_CODE_PATTERN.sub("", prose), closed


def _check_front_matter(data: Dict[str, Any], path: Path) -> List[Issue]:
    issues: List[Issue] = []

    for key in REQUIRED_FIELDS:
        if _is_blank(data.get(key)):
            issues.append(Issue(path, key, "is required and must not be empty"))

    for key in ("title", "description", "image"):
        value = data.get(key)
        if value is not None and not isinstance(value, str):
            issues.append(Issue(path, key, "must be a string"))

    if not _is_blank(data.get("pubDate")):
        try:
            parse_date(data["pubDate"])
        except ValueError as exc:
            issues.append(Issue(path, "pubDate", str(exc)))

    source = data.get("source")
    if source is not None:
        if not isinstance(source, str) or not _is_http_url(source):
            issues.append(Issue(path, "source", "must be an absolute http(s) URL"))

    partner = data.get("partner")
    if partner is not None and (not isinstance(partner, str) or _is_blank(partner)):
        issues.append(Issue(path, "partner", "must be a non-empty string"))

    slug = data.get("slug")
    if slug is not None and (not isinstance(slug, str) or not slug.strip("/ ")):
        issues.append(Issue(path, "slug", "must be a non-empty string"))

    for key in sorted(set(data) - set(REQUIRED_FIELDS) - set(OPTIONAL_FIELDS)):
        issues.append(Issue(path, key, "unknown front-matter field", "warning"))

    return issues


def _check_body(body: str, path: Path) -> List[Issue]:
    issues: List[Issue] = []

    prose, closed = strip_code(body)
    if not closed:
        issues.append(Issue(path, "body", "fenced code block is never closed"))

    soup = BeautifulSoup(prose, "lxml")
    for tag in soup.find_all(["img", "iframe"]):
        if _is_blank(tag.get("src")):
            issues.append(Issue(path, "body", f"<{tag.name}> has no src"))
        if tag.name == "img" and tag.get("alt") is None:
            issues.append(Issue(path, "body", f"<img src={tag.get('src')!r}> has no alt text", "warning"))

    return issues


def lint_post_file(path: Path) -> List[Issue]:
    """Check one post file against the front-matter and body rules."""

    try:
        data, body = split_front_matter(path.read_text(encoding="utf-8"))
    except FrontMatterError as exc:
        return [Issue(path, "front-matter", str(exc))]
    except UnicodeDecodeError:
        return [Issue(path, "front-matter", "file is not valid UTF-8")]

    if not data:
        return [Issue(path, "front-matter", "missing front-matter block")]

    return _check_front_matter(data, path) + _check_body(body, path)


def lint_directory(root: Path) -> List[Issue]:
    issues: List[Issue] = []
    slugs: Dict[str, List[Path]] = defaultdict(list)

    for path in iter_collection_files(root, CONTENT_SUFFIXES):
        file_issues = lint_post_file(path)
        issues.extend(file_issues)
        slugs[_slug_for(path, root)].append(path)

    for slug, paths in sorted(slugs.items()):
        if len(paths) > 1:
            for path in paths:
                issues.append(Issue(path, "slug", f"duplicate slug {slug!r}"))

    return issues


def _slug_for(path: Path, root: Path) -> str:
    try:
        data, _ = split_front_matter(path.read_text(encoding="utf-8"))
    except (FrontMatterError, UnicodeDecodeError):
        data = {}
    slug = data.get("slug")
    if isinstance(slug, str) and slug.strip("/ "):
        return slug.strip("/ ")
    return entry_id(path, root)


def collect_links(paths: Iterable[Path]) -> Dict[str, List[Path]]:
    """Map every absolute URL referenced by the given posts to the files using it."""

    links: Dict[str, List[Path]] = defaultdict(list)
    for path in paths:
        try:
            data, body = split_front_matter(path.read_text(encoding="utf-8"))
        except (FrontMatterError, UnicodeDecodeError):
            continue

        found: List[str] = []
        for key in ("source", "image"):
            value = data.get(key)
            if isinstance(value, str) and _is_http_url(value):
                found.append(value)

        prose, _ = strip_code(body)
        found.extend(MARKDOWN_LINK_PATTERN.findall(prose))
        soup = BeautifulSoup(prose, "lxml")
        for tag in soup.find_all(["a", "img", "iframe"]):
            url = tag.get("href") or tag.get("src")
            if isinstance(url, str) and _is_http_url(url):
                found.append(url)

        for url in dict.fromkeys(found):
            links[url].append(path)
    return links


def check_link(url: str, timeout: float = 10) -> Tuple[str, int | str]:
    headers = {"User-Agent": USER_AGENT}
    try:
        # HEAD first; some hosts reject it, so fall back to GET
        response = requests.head(url, headers=headers, timeout=timeout, allow_redirects=True)
        if response.status_code >= 400:
            response = requests.get(url, headers=headers, timeout=timeout, allow_redirects=True)
        return url, response.status_code
    except requests.RequestException as exc:
        return url, str(exc)


def check_links(links: Dict[str, List[Path]], workers: int = 8) -> List[Issue]:
    urls = sorted(links)
    if not urls:
        return []

    with ThreadPoolExecutor(max_workers=max(1, min(workers, len(urls)))) as executor:
        results = list(executor.map(check_link, urls))

    issues: List[Issue] = []
    for url, status in results:
        if isinstance(status, int) and status < 400:
            continue
        label = f"HTTP {status}" if isinstance(status, int) else status
        for path in links[url]:
            issues.append(Issue(path, "link", f"{url} is unreachable ({label})", "warning"))
    return issues
