"""Flask application factory for PTB.

Boots the host in a fixed order: authorization gate, configured extensions,
queue listeners for email status tracking, markdown filter, OpenAPI
document, then the plugin scan whose template variables are injected into
every rendered view.
"""

import logging
import os
import secrets
from pathlib import Path

from flask import Flask

from ptb import __version__
from ptb.config.models import PtbConfig
from ptb.extensions.boot import boot_extensions
from ptb.mail.log_store import EmailLogStore
from ptb.mail.tracking import register_mail_tracking
from ptb.plugins.loader import scan_and_load
from ptb.queue.events import QueueEvents
from ptb.web.auth import init_auth
from ptb.web.markdown import init_markdown
from ptb.web.openapi import init_openapi
from ptb.web.template_vars import init_template_vars

logger = logging.getLogger(__name__)


def create_app(
    config: PtbConfig | None = None,
    email_log_store: EmailLogStore | None = None,
) -> Flask:
    """Create the PTB Flask application.

    Args:
        config: Host configuration. Defaults to ``PtbConfig()``.
        email_log_store: Store updated by mail job listeners. Defaults to a
            SQLite store at ``config.db_path``.

    Raises:
        PluginBootError: If a plugin fails under the ``fail_fast`` policy.
        ExtensionBootError: If an extension fails under ``fail_fast``.
    """
    config = config or PtbConfig()

    # --- Flask app setup ---
    app = Flask(
        __name__,
        template_folder=str(Path(__file__).parent / "templates"),
    )
    app.secret_key = (
        config.secret_key or os.environ.get("PTB_SECRET_KEY") or secrets.token_hex(32)
    )
    app.config["APP_NAME"] = config.app_name
    app.config["PTB_VERSION"] = config.version or __version__
    app.config["PLUGIN_DIR"] = str(config.plugin_dir)
    app.config["HOST"] = config.host
    app.config["PORT"] = config.port
    app.config["DEBUG"] = config.debug
    app.extensions["ptb.config"] = config

    # --- Authorization gate and API tokens ---
    init_auth(app, config.api_tokens)

    # --- Extensions ---
    app.extensions["ptb.extensions"] = boot_extensions(
        app, config.extensions, policy=config.extension_error_policy
    )

    # --- Queue listeners ---
    queue_events = QueueEvents()
    app.extensions["ptb.queue"] = queue_events
    if config.mail.track_status:
        store = email_log_store or EmailLogStore.open(config.db_path)
        app.extensions["ptb.email_logs"] = store
        register_mail_tracking(queue_events, store, job_name=config.mail.job_name)

    # --- Template helpers ---
    init_markdown(app)

    # --- Blueprints ---
    from ptb.web.api.v1.admin import bp as api_admin_bp
    from ptb.web.api.v1.health import bp as health_bp
    from ptb.web.blueprints.dashboard import bp as dashboard_bp

    app.register_blueprint(dashboard_bp)
    app.register_blueprint(health_bp)
    app.register_blueprint(api_admin_bp)

    init_openapi(app, config.openapi)

    # --- Plugins ---
    registry = init_template_vars(app)
    result = scan_and_load(
        config.plugin_dir, app, registry, policy=config.plugin_error_policy
    )
    app.extensions["ptb.plugins"] = result

    logger.info(f"PTB web app created with {result.plugin_count} plugin(s)")
    return app
