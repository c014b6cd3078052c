"""Shared fixtures: a small content tree laid out like the site's src/content."""

from pathlib import Path

import pytest

SDK_POST = """---
title: Tips for building a PHP SDK
pubDate: 2023-05-12
image: /images/articles/php-sdk.png
description: A few lessons learned while building API SDKs in PHP.
source: https://www.treblle.com/blog/php-sdk-tips
partner: Treblle
---

Start with a builder over a PSR-18 client.

```php
$sdk = SDK::build(apiToken: 'secret');
```
"""

DOCKER_POST = """---
title: Laravel and Docker
pubDate: "2022-11-03"
image: /images/articles/docker.png
description: Setting up Laravel with Docker and Traefik.
---

<iframe src="https://www.youtube.com/embed/abc123"></iframe>

![diagram](https://example.com/diagram.png)
"""

VERSIONING_POST = """---
title: API Versioning
pubDate: 2023-05-12
image: /images/articles/versioning.png
description: Should you version your API?
---

Opinion piece.
"""


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    root = tmp_path / "content"
    write(root / "posts" / "php-sdk-tips.md", SDK_POST)
    write(root / "posts" / "laravel-docker.md", DOCKER_POST)
    write(root / "posts" / "api-versioning.md", VERSIONING_POST)
    write(root / "events" / "laracon-eu.yaml", "name: Laracon EU\nyear: 2023\nlocation: Amsterdam\n")
    write(
        root / "talks" / "building-sdks.md",
        "---\ntitle: Building SDKs\ndescription: A talk.\ntype: conference\n"
        "image: /images/talks/sdk.png\nevents:\n  - laracon-eu\n---\nSlides.\n",
    )
    write(
        root / "sponsors" / "treblle.json",
        '{"name": "Treblle", "logo": "./treblle.svg", "website": "https://treblle.com"}',
    )
    return root


@pytest.fixture
def posts_dir(content_dir: Path) -> Path:
    return content_dir / "posts"
