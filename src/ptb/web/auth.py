"""Bearer token authentication and the permission gate for the PTB web API."""

import hmac
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import wraps
from typing import Any

from flask import current_app, g, jsonify, request

from ptb.config.models import ApiToken

logger = logging.getLogger(__name__)

GATE_KEY = "ptb.gate"
TOKENS_KEY = "ptb.api_tokens"


@dataclass
class AuthUser:
    """The user behind an authenticated request."""

    user_id: int
    name: str = ""
    permissions: list[str] = field(default_factory=list)
    scopes: list[str] = field(default_factory=list)

    @classmethod
    def from_token(cls, token: ApiToken) -> "AuthUser":
        return cls(
            user_id=token.user_id,
            name=token.name,
            permissions=list(token.permissions),
            scopes=list(token.scopes),
        )

    def has_permission(self, permission: str) -> bool:
        return "*" in self.permissions or permission in self.permissions

    def has_scope(self, scope: str) -> bool:
        return scope in self.scopes


class Gate:
    """Named authorization abilities, each a callback ``(user, *args) -> bool``."""

    def __init__(self) -> None:
        self._abilities: dict[str, Callable[..., bool]] = {}

    def define(self, ability: str, callback: Callable[..., bool]) -> None:
        self._abilities[ability] = callback

    def has(self, ability: str) -> bool:
        return ability in self._abilities

    def allows(self, user: Any, ability: str, *args: Any) -> bool:
        """Check an ability. Undefined abilities and anonymous users are denied."""
        callback = self._abilities.get(ability)
        if callback is None or user is None:
            return False
        return bool(callback(user, *args))

    def denies(self, user: Any, ability: str, *args: Any) -> bool:
        return not self.allows(user, ability, *args)


def get_gate() -> Gate:
    return current_app.extensions[GATE_KEY]


def _extract_bearer_token() -> str:
    """Extract bearer token from Authorization header, or empty string."""
    auth = request.headers.get("Authorization", "")
    if auth.startswith("Bearer "):
        return auth[7:]
    return ""


def _match_token(provided: str, tokens: list[ApiToken]) -> ApiToken | None:
    """Timing-safe lookup of the configured token matching ``provided``."""
    match = None
    for token in tokens:
        if hmac.compare_digest(provided.encode(), token.token.encode()):
            match = token
    return match


def require_auth(f):
    """Decorator that enforces Bearer token authentication.

    When no API tokens are configured, auth is disabled (development mode)
    and ``g.user`` is None.
    """

    @wraps(f)
    def decorated(*args, **kwargs):
        tokens: list[ApiToken] = current_app.extensions.get(TOKENS_KEY, [])
        if not tokens:
            g.user = None
            return f(*args, **kwargs)

        provided = _extract_bearer_token()
        if not provided:
            return jsonify({"error": "Missing or invalid authorization"}), 401

        token = _match_token(provided, tokens)
        if token is None:
            logger.warning(f"Rejected bearer token from {request.remote_addr}")
            return jsonify({"error": "Invalid authentication token"}), 403

        g.user = AuthUser.from_token(token)
        return f(*args, **kwargs)

    return decorated


def require_permission(permission: str):
    """Decorator that checks the ``has-permission`` gate for the current user.

    Must be applied beneath ``require_auth``. In development mode (no
    tokens configured) every request is allowed.
    """

    def decorator(f):
        @wraps(f)
        def decorated(*args, **kwargs):
            if not current_app.extensions.get(TOKENS_KEY):
                return f(*args, **kwargs)

            user = getattr(g, "user", None)
            if user is None:
                return jsonify({"error": "Authentication required"}), 401
            if get_gate().denies(user, "has-permission", permission):
                return jsonify({"error": f"Missing permission: {permission}"}), 403
            return f(*args, **kwargs)

        return decorated

    return decorator


def require_scope(scope: str):
    """Decorator that requires the authenticated token to carry ``scope``."""

    def decorator(f):
        @wraps(f)
        def decorated(*args, **kwargs):
            user = getattr(g, "user", None)
            if user is None:
                return jsonify({"error": "Authentication required"}), 401
            if not user.has_scope(scope):
                return jsonify({"error": f"Token lacks scope: {scope}"}), 403
            return f(*args, **kwargs)

        return decorated

    return decorator


def init_auth(app, tokens: list[ApiToken]) -> Gate:
    """Attach the gate and configured tokens to ``app``.

    Defines the ``has-permission`` ability used by admin endpoints, and
    resolves an optional bearer token into ``g.user`` before every request
    so rendered views know who is calling. That hook never rejects a
    request; enforcement stays with ``require_auth``.
    """
    gate = Gate()
    gate.define(
        "has-permission",
        lambda user, permission: user.has_permission(permission),
    )
    app.extensions[GATE_KEY] = gate
    app.extensions[TOKENS_KEY] = list(tokens)

    @app.before_request
    def resolve_user():
        g.user = None
        configured: list[ApiToken] = current_app.extensions.get(TOKENS_KEY, [])
        provided = _extract_bearer_token()
        if configured and provided:
            token = _match_token(provided, configured)
            if token is not None:
                g.user = AuthUser.from_token(token)

    return gate
