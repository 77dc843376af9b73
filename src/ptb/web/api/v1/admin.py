"""Admin API endpoints: plugin and extension boot status."""

import logging
from dataclasses import asdict

from flask import Blueprint, current_app, jsonify

from ptb.web.auth import require_auth, require_permission
from ptb.web.template_vars import get_template_vars

logger = logging.getLogger(__name__)

bp = Blueprint("api_admin", __name__, url_prefix="/api/v1/admin")


@bp.route("/plugins")
@require_auth
@require_permission("plugins.view")
def list_plugins():
    """Loaded plugins and per-plugin boot outcomes."""
    result = current_app.extensions["ptb.plugins"]
    return jsonify(
        {
            "loaded": result.loaded,
            "count": result.plugin_count,
            "elapsed": round(result.elapsed, 4),
            "outcomes": [asdict(o) for o in result.outcomes],
        }
    )


@bp.route("/extensions")
@require_auth
@require_permission("extensions.view")
def list_extensions():
    """Per-extension boot outcomes."""
    outcomes = current_app.extensions["ptb.extensions"]
    return jsonify({"outcomes": [asdict(o) for o in outcomes]})


@bp.route("/template-vars")
@require_auth
@require_permission("plugins.view")
def template_vars():
    """Current template variables, as merged at boot."""
    return jsonify(get_template_vars().snapshot())
