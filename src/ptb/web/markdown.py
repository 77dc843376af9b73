"""Markdown rendering for templates and plugins."""

import markdown as md
from flask import Flask
from markupsafe import Markup

MARKDOWN_EXTENSIONS = ["tables"]


def render_markdown(text: str | None) -> Markup:
    """Render markdown (with table support) to safe HTML."""
    if not text:
        return Markup("")
    return Markup(md.markdown(text, extensions=MARKDOWN_EXTENSIONS))


def init_markdown(app: Flask) -> None:
    """Expose ``render_markdown`` as the ``markdown`` Jinja filter."""
    app.jinja_env.filters["markdown"] = render_markdown
    app.extensions["ptb.markdown"] = render_markdown
