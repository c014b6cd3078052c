"""Load, lint and publish the Markdown content of a developer blog."""
