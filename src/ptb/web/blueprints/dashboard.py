"""Dashboard blueprint: landing page showing boot diagnostics."""

from flask import Blueprint, current_app, render_template

bp = Blueprint("dashboard", __name__)


@bp.route("/")
def index():
    """Landing page."""
    result = current_app.extensions["ptb.plugins"]
    return render_template("dashboard.html", plugins=result.outcomes)
