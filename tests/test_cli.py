from pathlib import Path

import pytest
from lxml import etree

from blog_content.cli import build_parser, main

from conftest import write


def test_parser_defaults():
    args = build_parser().parse_args(["list"])

    assert args.content == "src/content"
    assert args.order == "desc"
    assert args.limit is None


def test_lint_clean_content(content_dir: Path, capsys):
    main(["lint", "--content", str(content_dir)])

    out = capsys.readouterr().out
    assert "[done] errors=0, warnings=0" in out


def test_lint_exits_with_error_code(content_dir: Path, capsys):
    write(content_dir / "posts" / "broken.md", "---\ntitle: Only a title\n---\n")

    with pytest.raises(SystemExit) as exc:
        main(["lint", "--content", str(content_dir)])

    assert exc.value.code == 1
    out = capsys.readouterr().out
    assert "[error]" in out
    assert "broken.md: description" in out


def test_lint_reports_bad_data_collections(content_dir: Path, capsys):
    write(content_dir / "events" / "bad.yaml", "name: X\n")

    with pytest.raises(SystemExit):
        main(["lint", "--content", str(content_dir)])

    assert "bad.yaml: year" in capsys.readouterr().out


def test_list_prints_newest_first(content_dir: Path, capsys):
    main(["list", "--content", str(content_dir), "--limit", "2"])

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "[load] posts: 3"
    assert lines[1].startswith("2023-05-12  php-sdk-tips")
    assert len(lines) == 3


def test_rss_writes_feed(content_dir: Path, tmp_path: Path):
    out = tmp_path / "dist" / "rss.xml"

    main(["--site", "https://blog.test", "rss", "--content", str(content_dir), "--out", str(out)])

    root = etree.fromstring(out.read_bytes())
    assert root.findtext("channel/item/link") == "https://blog.test/articles/php-sdk-tips/"


def test_rss_stops_on_invalid_post(content_dir: Path, tmp_path: Path):
    write(content_dir / "posts" / "broken.md", "---\ntitle: x\n---\n")

    with pytest.raises(SystemExit) as exc:
        main(["rss", "--content", str(content_dir), "--out", str(tmp_path / "rss.xml")])

    assert str(exc.value.code).startswith("[error]")


def test_missing_posts_directory(tmp_path: Path):
    with pytest.raises(SystemExit) as exc:
        main(["list", "--content", str(tmp_path)])

    assert "posts directory not found" in str(exc.value.code)


def test_manifest_command(tmp_path: Path):
    out = tmp_path / "manifest.webmanifest"

    main(["manifest", "--out", str(out)])

    assert '"theme_color": "#2dd4bf"' in out.read_text(encoding="utf-8")


def test_share_command_uses_config_file(tmp_path: Path, capsys):
    config = tmp_path / "site.yaml"
    config.write_text("utm_campaign: spring\n", encoding="utf-8")

    main(["--config", str(config), "share", "https://a.test/x", "--type", "x", "--term", "t"])

    assert capsys.readouterr().out.strip() == (
        "https://a.test/x?utm_campaign=spring&utm_medium="
        "&utm_source=juststeveking.uk&utm_type=x&utm_term=t"
    )


def test_bad_config_is_reported(tmp_path: Path):
    config = tmp_path / "site.yaml"
    config.write_text("nope: 1\n", encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        main(["--config", str(config), "manifest", "--out", str(tmp_path / "m.json")])

    assert "unknown setting" in str(exc.value.code)


def test_lint_rejects_slug_that_loading_would_reject(content_dir: Path, capsys):
    write(
        content_dir / "posts" / "numbered.md",
        "---\ntitle: T\npubDate: 2023-01-01\nimage: /i.png\ndescription: D\nslug: 123\n---\n",
    )

    with pytest.raises(SystemExit) as exc:
        main(["lint", "--content", str(content_dir)])

    assert exc.value.code == 1
    assert "numbered.md: slug: must be a non-empty string" in capsys.readouterr().out


def test_rss_keeps_underscores_in_article_links(content_dir: Path, tmp_path: Path):
    (content_dir / "posts" / "laravel-docker.md").rename(content_dir / "posts" / "laravel_docker.md")
    out = tmp_path / "rss.xml"

    main(["rss", "--content", str(content_dir), "--out", str(out)])

    links = [e.text for e in etree.fromstring(out.read_bytes()).iter("link")]
    assert "https://www.juststeveking.uk/articles/laravel_docker/" in links
