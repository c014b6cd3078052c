from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple
import json
import re

import yaml

from .errors import ContentError, FrontMatterError
from .frontmatter import parse_date, split_front_matter
from .types import (
    Event,
    Hardware,
    Post,
    Service,
    SiteContent,
    Software,
    Sponsor,
    Talk,
    Testimonial,
)

CONTENT_SUFFIXES = (".md", ".mdx")
DATA_SUFFIXES = (".yaml", ".yml", ".json")
SLUG_PATTERN = re.compile(r"[^\w]+")

Builder = Callable[[Dict[str, Any], str, str, Path], Any]


def slugify(name: str) -> str:
    slug = SLUG_PATTERN.sub("-", name.lower()).strip("-")
    return re.sub(r"-{2,}", "-", slug) or "post"


def entry_id(path: Path, root: Path) -> str:
    """Collection id of a file: its path below ``root`` without extension, slugified per segment."""

    relative = path.relative_to(root).with_suffix("")
    return "/".join(slugify(part) for part in relative.parts)


def _where(path: Path, key: str) -> str:
    return f"{path}: {key}"


def _require_str(data: Dict[str, Any], key: str, path: Path) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ContentError(f"{_where(path, key)} is required and must be a non-empty string")
    return value


def _optional_str(data: Dict[str, Any], key: str, path: Path) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ContentError(f"{_where(path, key)} must be a string")
    return value


def _require_int(data: Dict[str, Any], key: str, path: Path) -> int:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ContentError(f"{_where(path, key)} is required and must be a number")
    return value


def _require_date(data: Dict[str, Any], key: str, path: Path) -> date:
    if key not in data:
        raise ContentError(f"{_where(path, key)} is required")
    try:
        return parse_date(data[key])
    except ValueError as exc:
        raise ContentError(f"{_where(path, key)} {exc}") from exc


def _require_refs(data: Dict[str, Any], key: str, path: Path) -> Tuple[str, ...]:
    value = data.get(key)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ContentError(f"{_where(path, key)} must be a list of entry ids")
    return tuple(value)


def _build_post(data: Dict[str, Any], slug: str, body: str, path: Path) -> Post:
    return Post(
        title=_require_str(data, "title", path),
        description=_require_str(data, "description", path),
        pub_date=_require_date(data, "pubDate", path),
        slug=slug,
        body=body,
        image=_optional_str(data, "image", path),
        partner=_optional_str(data, "partner", path),
        source=_optional_str(data, "source", path),
        path=path,
    )


def _build_talk(data: Dict[str, Any], slug: str, body: str, path: Path) -> Talk:
    return Talk(
        title=_require_str(data, "title", path),
        description=_require_str(data, "description", path),
        type=_require_str(data, "type", path),
        image=_require_str(data, "image", path),
        slug=slug,
        events=_require_refs(data, "events", path),
        body=body,
        path=path,
    )


def _build_event(data: Dict[str, Any], id: str, _body: str, path: Path) -> Event:
    return Event(
        id=id,
        name=_require_str(data, "name", path),
        year=_require_int(data, "year", path),
        location=_require_str(data, "location", path),
    )


def _build_hardware(data: Dict[str, Any], id: str, _body: str, path: Path) -> Hardware:
    return Hardware(
        id=id,
        title=_require_str(data, "title", path),
        spec=_require_str(data, "spec", path),
        description=_require_str(data, "description", path),
    )


def _build_service(data: Dict[str, Any], id: str, _body: str, path: Path) -> Service:
    return Service(
        id=id,
        title=_require_str(data, "title", path),
        description=_require_str(data, "description", path),
    )


def _build_software(data: Dict[str, Any], id: str, _body: str, path: Path) -> Software:
    return Software(
        id=id,
        title=_require_str(data, "title", path),
        description=_require_str(data, "description", path),
    )


def _build_sponsor(data: Dict[str, Any], id: str, _body: str, path: Path) -> Sponsor:
    return Sponsor(
        id=id,
        name=_require_str(data, "name", path),
        logo=_require_str(data, "logo", path),
        website=_require_str(data, "website", path),
    )


def _build_testimonial(
    data: Dict[str, Any], id: str, _body: str, path: Path
) -> Testimonial:
    return Testimonial(
        id=id,
        name=_require_str(data, "name", path),
        role=_require_str(data, "role", path),
        company=_require_str(data, "company", path),
        avatar=_require_str(data, "avatar", path),
        content=_require_str(data, "content", path),
    )


# name -> (kind, builder); "content" collections are Markdown, "data" are YAML/JSON
COLLECTIONS: Dict[str, Tuple[str, Builder]] = {
    "events": ("data", _build_event),
    "hardware": ("data", _build_hardware),
    "posts": ("content", _build_post),
    "services": ("data", _build_service),
    "software": ("data", _build_software),
    "sponsors": ("data", _build_sponsor),
    "talks": ("content", _build_talk),
    "testimonials": ("data", _build_testimonial),
}


def iter_collection_files(root: Path, suffixes: Iterable[str]) -> List[Path]:
    suffixes = tuple(suffixes)
    files = [
        path
        for path in root.rglob("*")
        if path.is_file()
        and path.suffix.lower() in suffixes
        and not path.name.startswith("_")
    ]
    return sorted(files, key=lambda p: entry_id(p, root))


def _read_markdown(path: Path, root: Path) -> Tuple[Dict[str, Any], str, str]:
    try:
        data, body = split_front_matter(path.read_text(encoding="utf-8"))
    except FrontMatterError as exc:
        raise ContentError(f"{path}: {exc}") from exc

    slug = data.get("slug")
    if slug is not None:
        if not isinstance(slug, str) or not slug.strip("/ "):
            raise ContentError(f"{_where(path, 'slug')} must be a non-empty string")
        slug = slug.strip("/ ")
    else:
        slug = entry_id(path, root)
    return data, body, slug


def _read_data(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (ValueError, yaml.YAMLError) as exc:
        raise ContentError(f"{path}: cannot parse data file: {exc}") from exc

    if not isinstance(data, dict):
        raise ContentError(f"{path}: data entry must be a mapping")
    return data


def load_post(path: Path, root: Optional[Path] = None) -> Post:
    """Read one Markdown post; the slug comes from front-matter or the path below ``root``."""

    root = root if root is not None else path.parent
    data, body, slug = _read_markdown(path, root)
    return _build_post(data, slug, body, path)


def load_collection(root: Path, name: str) -> List[Any]:
    if name not in COLLECTIONS:
        raise ContentError(f"unknown collection: {name}")
    kind, builder = COLLECTIONS[name]

    entries: List[Any] = []
    if kind == "content":
        for path in iter_collection_files(root, CONTENT_SUFFIXES):
            data, body, slug = _read_markdown(path, root)
            entries.append(builder(data, slug, body, path))
    else:
        for path in iter_collection_files(root, DATA_SUFFIXES):
            entries.append(builder(_read_data(path), entry_id(path, root), "", path))
    return entries


def load_site(content_dir: Path) -> SiteContent:
    """Load every collection directory present under ``content_dir``."""

    if not content_dir.is_dir():
        raise ContentError(f"content directory not found: {content_dir}")

    site = SiteContent()
    for name in COLLECTIONS:
        collection_dir = content_dir / name
        if collection_dir.is_dir():
            setattr(site, name, load_collection(collection_dir, name))

    check_references(site)
    return site


def check_references(site: SiteContent) -> None:
    known = {event.id for event in site.events}
    for talk in site.talks:
        missing = [ref for ref in talk.events if ref not in known]
        if missing:
            raise ContentError(
                f"{talk.path}: events references unknown event(s): {', '.join(missing)}"
            )


def sort_posts(posts: Iterable[Post], order: str = "desc") -> List[Post]:
    if order not in ("asc", "desc"):
        raise ValueError(f"order must be 'asc' or 'desc', got {order!r}")

    def _sort_key(p: Post) -> Tuple[date, str]:
        # Slug breaks ties so posts on the same day keep a stable order.
        return (p.pub_date, p.slug)

    return sorted(posts, key=_sort_key, reverse=order == "desc")
