from __future__ import annotations

from argparse import ArgumentParser, Namespace
from pathlib import Path
from typing import List, Optional

from .config import SiteConfig, load_site_config
from .content import (
    COLLECTIONS,
    CONTENT_SUFFIXES,
    check_references,
    iter_collection_files,
    load_collection,
    sort_posts,
)
from .errors import ConfigError, ContentError
from .feed import build_rss
from .lint import check_links, collect_links, lint_directory
from .manifest import write_manifest
from .share import share
from .types import Issue, Post, SiteContent


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        description="Validate blog content and publish its feed, manifest and share links."
    )
    parser.add_argument(
        "--config", type=str, default=None, help="Optional YAML file with site settings"
    )
    parser.add_argument(
        "--site", type=str, default=None, help="Override the site URL from the config"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    def add_content_arg(p: ArgumentParser) -> None:
        p.add_argument(
            "--content",
            type=str,
            default="src/content",
            help="Content directory holding one folder per collection (default: src/content)",
        )

    lint = sub.add_parser("lint", help="Check front-matter and bodies of every post")
    add_content_arg(lint)
    lint.add_argument(
        "--check-links",
        action="store_true",
        help="Also request every absolute URL referenced by the posts",
    )
    lint.add_argument(
        "--workers",
        type=int,
        default=8,
        help="Number of parallel link-check workers (default: 8)",
    )

    listing = sub.add_parser("list", help="Print posts with their date and slug")
    add_content_arg(listing)
    listing.add_argument(
        "--order",
        choices=("asc", "desc"),
        default="desc",
        help="Sort posts by date: asc or desc (default: desc)",
    )
    listing.add_argument(
        "--limit", type=int, default=None, help="Only print the first N posts"
    )

    rss = sub.add_parser("rss", help="Write the RSS feed of all posts")
    add_content_arg(rss)
    rss.add_argument(
        "--out", type=str, default="dist/rss.xml", help="Output file (default: dist/rss.xml)"
    )

    manifest = sub.add_parser("manifest", help="Write the web app manifest")
    manifest.add_argument(
        "--out",
        type=str,
        default="dist/manifest.webmanifest",
        help="Output file (default: dist/manifest.webmanifest)",
    )

    share_cmd = sub.add_parser("share", help="Print a UTM-tagged share link")
    share_cmd.add_argument("url", type=str, help="Page URL to share")
    share_cmd.add_argument("--type", type=str, default="", help="utm_type value")
    share_cmd.add_argument("--term", type=str, default="", help="utm_term value")

    return parser


def _site_config(args: Namespace) -> SiteConfig:
    path = Path(args.config) if args.config else None
    return load_site_config(path, site=args.site)


def _print_issues(issues: List[Issue]) -> None:
    for issue in issues:
        tag = "[error]" if issue.severity == "error" else "[warn]"
        print(f"{tag} {issue}")


def run_lint(args: Namespace) -> int:
    content_dir = Path(args.content)
    posts_dir = content_dir / "posts"
    if not posts_dir.is_dir():
        raise SystemExit(f"[error] posts directory not found: {posts_dir}")

    print(f"[lint] checking {posts_dir}")
    issues = lint_directory(posts_dir)

    site = SiteContent()
    for name in COLLECTIONS:
        collection_dir = content_dir / name
        if name == "posts" or not collection_dir.is_dir():
            continue
        try:
            setattr(site, name, load_collection(collection_dir, name))
        except ContentError as exc:
            issues.append(Issue(collection_dir, name, str(exc)))
    try:
        check_references(site)
    except ContentError as exc:
        issues.append(Issue(content_dir / "talks", "events", str(exc)))

    if args.check_links:
        links = collect_links(iter_collection_files(posts_dir, CONTENT_SUFFIXES))
        print(f"[lint] links to check: {len(links)}")
        issues.extend(check_links(links, workers=args.workers))

    _print_issues(issues)
    errors = sum(1 for issue in issues if issue.severity == "error")
    warnings = len(issues) - errors
    print(f"[done] errors={errors}, warnings={warnings}")
    return 1 if errors else 0


def _load_posts(content_dir: Path) -> List[Post]:
    posts_dir = content_dir / "posts"
    if not posts_dir.is_dir():
        raise SystemExit(f"[error] posts directory not found: {posts_dir}")
    posts = load_collection(posts_dir, "posts")
    print(f"[load] posts: {len(posts)}")
    return posts


def run_list(args: Namespace) -> int:
    posts = sort_posts(_load_posts(Path(args.content)), order=args.order)
    if args.limit:
        posts = posts[: args.limit]
    for post in posts:
        print(f"{post.pub_date.isoformat()}  {post.slug}  {post.title}")
    return 0


def run_rss(args: Namespace) -> int:
    site = _site_config(args)
    posts = _load_posts(Path(args.content))

    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(build_rss(posts, site))
    print(f"[done] feed written to {out_path}")
    return 0


def run_manifest(args: Namespace) -> int:
    path = write_manifest(_site_config(args), Path(args.out))
    print(f"[done] manifest written to {path}")
    return 0


def run_share(args: Namespace) -> int:
    print(share(args.url, args.type, args.term, _site_config(args)))
    return 0


COMMANDS = {
    "lint": run_lint,
    "list": run_list,
    "rss": run_rss,
    "manifest": run_manifest,
    "share": run_share,
}


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        code = COMMANDS[args.command](args)
    except (ConfigError, ContentError) as exc:
        raise SystemExit(f"[error] {exc}")

    if code:
        raise SystemExit(code)


if __name__ == "__main__":
    main()
