"""Tests for the PTB Flask application factory."""

import pytest
from flask import render_template_string

from ptb.config.models import ApiToken, OpenApiConfig, PtbConfig
from ptb.mail.log_store import EmailLogStore
from ptb.mail.tracking import build_mail_job
from ptb.plugins.results import PluginBootError
from ptb.web.app import create_app

ROUTE_PLUGIN = """
from flask import render_template_string


class HelloServiceProvider:
    def __init__(self, app):
        self.app = app

    def boot(self):
        self.app.add_url_rule(
            "/hello",
            "hello",
            lambda: render_template_string(
                "{{ greeting }} from {{ PTB_APP_NAME }} ({{ PTB_PLUGIN_COUNT }})"
            ),
        )

    def register_template_vars(self):
        return {"greeting": "Hi"}
"""


@pytest.fixture
def store():
    store = EmailLogStore.open(":memory:")
    yield store
    store.close()


@pytest.fixture
def config(plugin_root):
    return PtbConfig(app_name="Test Shop", plugin_dir=plugin_root, secret_key="test")


@pytest.fixture
def app(config, store, make_plugin):
    make_plugin("Hello", ROUTE_PLUGIN)
    flask_app = create_app(config, email_log_store=store)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


class TestBootstrap:
    def test_plugin_is_loaded(self, app):
        assert app.extensions["ptb.plugins"].loaded == ["Hello"]

    def test_plugin_route_sees_template_vars(self, client):
        response = client.get("/hello")
        assert response.status_code == 200
        assert response.data == b"Hi from Test Shop (1)"

    def test_dashboard_renders_diagnostics(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert b"Test Shop" in response.data
        assert b"Hello" in response.data
        assert b"GET http://localhost/" in response.data

    def test_missing_plugin_dir(self, tmp_path, store):
        app = create_app(PtbConfig(plugin_dir=tmp_path / "none"), email_log_store=store)
        assert app.extensions["ptb.plugins"].loaded == []
        response = app.test_client().get("/")
        assert b"No plugins found" in response.data

    def test_failing_plugin_aborts_startup(self, config, store, make_plugin):
        make_plugin(
            "Bad",
            """
            class BadServiceProvider:
                def __init__(self, app):
                    pass

                def boot(self):
                    raise RuntimeError("cannot boot")
            """,
        )
        with pytest.raises(PluginBootError, match="Bad"):
            create_app(config, email_log_store=store)

    def test_collect_policy_keeps_serving(self, config, store, make_plugin):
        make_plugin(
            "Bad",
            """
            class BadServiceProvider:
                def __init__(self, app):
                    raise RuntimeError("cannot construct")
            """,
        )
        config = config.model_copy(update={"plugin_error_policy": "collect"})

        app = create_app(config, email_log_store=store)

        assert app.extensions["ptb.plugins"].failures[0].name == "Bad"
        assert app.test_client().get("/api/v1/health").status_code == 200

    def test_markdown_filter_registered(self, app):
        assert "markdown" in app.jinja_env.filters

    def test_mail_jobs_update_email_log(self, app, store):
        log_id = store.create("Welcome", "user@example.com")

        app.extensions["ptb.queue"].work(build_mail_job(log_id), lambda job: None)

        assert store.get(log_id)["status"] == "sent"


class TestHealthApi:
    def test_health(self, client):
        response = client.get("/api/v1/health")
        assert response.get_json() == {"status": "ok"}

    def test_version(self, client):
        data = client.get("/api/v1/version").get_json()
        assert data["name"] == "Test Shop"
        assert data["api_version"] == "v1"


@pytest.fixture
def secured_client(plugin_root, store):
    config = PtbConfig(
        plugin_dir=plugin_root,
        api_tokens=[
            ApiToken(token="admin-token", user_id=1, name="admin", permissions=["*"],
                     scopes=["profile"]),
            ApiToken(token="viewer-token", user_id=2, name="viewer", permissions=[]),
        ],
    )
    app = create_app(config, email_log_store=store)
    return app.test_client()


class TestAdminApi:
    def test_requires_token(self, secured_client):
        assert secured_client.get("/api/v1/admin/plugins").status_code == 401

    def test_rejects_unknown_token(self, secured_client):
        response = secured_client.get(
            "/api/v1/admin/plugins", headers={"Authorization": "Bearer nope"}
        )
        assert response.status_code == 403

    def test_requires_permission(self, secured_client):
        response = secured_client.get(
            "/api/v1/admin/plugins", headers={"Authorization": "Bearer viewer-token"}
        )
        assert response.status_code == 403

    def test_admin_sees_plugins(self, secured_client):
        response = secured_client.get(
            "/api/v1/admin/plugins", headers={"Authorization": "Bearer admin-token"}
        )
        assert response.status_code == 200
        assert response.get_json()["count"] == 0

    def test_template_vars_endpoint(self, secured_client):
        response = secured_client.get(
            "/api/v1/admin/template-vars", headers={"Authorization": "Bearer admin-token"}
        )
        data = response.get_json()
        assert data["PTB_PLUGIN_COUNT"] == 0
        assert data["PTB_USER_ID"] is None

    def test_views_see_the_calling_user(self, plugin_root, store):
        config = PtbConfig(
            plugin_dir=plugin_root,
            api_tokens=[ApiToken(token="t", user_id=7, name="seven")],
        )
        app = create_app(config, email_log_store=store)
        app.add_url_rule(
            "/whoami", "whoami", lambda: render_template_string("uid={{ PTB_USER_ID }}")
        )
        client = app.test_client()

        assert client.get("/whoami", headers={"Authorization": "Bearer t"}).data == b"uid=7"
        assert client.get("/whoami").data == b"uid=None"
        assert client.get(
            "/whoami", headers={"Authorization": "Bearer wrong"}
        ).data == b"uid=None"

    def test_dev_mode_without_tokens(self, client):
        response = client.get("/api/v1/admin/extensions")
        assert response.status_code == 200
        assert response.get_json() == {"outcomes": []}


class TestProfileApi:
    def test_profile_scope_required(self, secured_client):
        response = secured_client.get(
            "/api/v1/me", headers={"Authorization": "Bearer viewer-token"}
        )
        assert response.status_code == 403

    def test_profile(self, secured_client):
        response = secured_client.get(
            "/api/v1/me", headers={"Authorization": "Bearer admin-token"}
        )
        assert response.status_code == 200
        assert response.get_json() == {"user_id": 1, "name": "admin", "permissions": ["*"]}


class TestOpenApi:
    def test_document_lists_admin_routes_only(self, client):
        doc = client.get("/docs/api.json").get_json()
        assert "/api/v1/admin/plugins" in doc["paths"]
        assert "/api/v1/health" not in doc["paths"]
        assert doc["components"]["securitySchemes"]["bearer"]["scheme"] == "bearer"

    def test_document_disabled(self, plugin_root, store):
        config = PtbConfig(plugin_dir=plugin_root, openapi=OpenApiConfig(enabled=False))
        app = create_app(config, email_log_store=store)
        assert app.test_client().get("/docs/api.json").status_code == 404
