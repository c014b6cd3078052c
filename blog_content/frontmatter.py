from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Tuple
import re

import yaml

from .errors import FrontMatterError

FENCE = "---"
DATE_PATTERN = re.compile(
    r"^(\d{4}-\d{2}-\d{2})"
    r"(?:[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?: ?(?:Z|[+-]\d{2}:?\d{2}))?)?$"
)


def split_front_matter(text: str) -> Tuple[Dict[str, Any], str]:
    """Split a Markdown document into its YAML front-matter mapping and body."""

    text = text.lstrip("\ufeff").replace("\r\n", "\n")
    lines = text.split("\n")
    if not lines or lines[0].rstrip() != FENCE:
        return {}, text

    for index in range(1, len(lines)):
        if lines[index].rstrip() == FENCE:
            break
    else:
        raise FrontMatterError("front-matter block is not closed with '---'")

    block = "\n".join(lines[1:index])
    body = "\n".join(lines[index + 1 :])

    try:
        data = yaml.safe_load(block) if block.strip() else {}
    except yaml.YAMLError as exc:
        raise FrontMatterError(f"invalid YAML in front-matter: {exc}") from exc
    except ValueError as exc:
        # PyYAML builds unquoted dates eagerly, so 2023-02-30 fails here.
        raise FrontMatterError(f"invalid value in front-matter: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontMatterError("front-matter must be a mapping of keys to values")
    return data, body


def parse_date(value: Any) -> date:
    """Accept a YAML date, a datetime, or an ISO ``YYYY-MM-DD`` string."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        match = DATE_PATTERN.match(value.strip())
        if match:
            try:
                return datetime.strptime(match.group(1), "%Y-%m-%d").date()
            except ValueError as exc:
                raise ValueError(f"not a valid calendar date: {value!r}") from exc
    raise ValueError(f"expected a date like YYYY-MM-DD, got {value!r}")
