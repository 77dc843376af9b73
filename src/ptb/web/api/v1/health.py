"""Health, version and current-user API endpoints."""

from dataclasses import asdict

from flask import Blueprint, current_app, g, jsonify

from ptb import __version__
from ptb.web.auth import require_auth, require_scope

bp = Blueprint("api_health", __name__)


@bp.route("/api/v1/health")
def health():
    """Health check endpoint."""
    return jsonify({"status": "ok"})


@bp.route("/api/v1/version")
def version():
    """Version info endpoint."""
    return jsonify(
        {
            "version": current_app.config.get("PTB_VERSION") or __version__,
            "api_version": "v1",
            "name": current_app.config.get("APP_NAME", "PTB"),
        }
    )


@bp.route("/api/v1/me")
@require_auth
@require_scope("profile")
def me():
    """Profile of the authenticated user."""
    user = asdict(g.user)
    user.pop("scopes")
    return jsonify(user)
