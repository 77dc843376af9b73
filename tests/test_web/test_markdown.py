"""Tests for markdown rendering."""

from flask import Flask, render_template_string
from markupsafe import Markup

from ptb.web.markdown import init_markdown, render_markdown


def test_renders_tables():
    html = render_markdown("| a | b |\n|---|---|\n| 1 | 2 |\n")
    assert "<table>" in html
    assert "<td>1</td>" in html


def test_returns_markup():
    assert isinstance(render_markdown("**bold**"), Markup)
    assert "<strong>bold</strong>" in render_markdown("**bold**")


def test_empty_input():
    assert render_markdown("") == ""
    assert render_markdown(None) == ""


def test_jinja_filter_is_not_escaped():
    app = Flask(__name__)
    init_markdown(app)
    with app.app_context():
        rendered = render_template_string("{{ text | markdown }}", text="# Title")
    assert "<h1>Title</h1>" in rendered
