from __future__ import annotations


class FrontMatterError(ValueError):
    """The YAML block at the top of a Markdown file is malformed."""


class ContentError(ValueError):
    """A content or data file does not match its collection schema."""


class ConfigError(ValueError):
    """The site configuration file is invalid."""
