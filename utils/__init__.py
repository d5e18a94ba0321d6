from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar, Any, cast
from flask import current_app, jsonify, render_template_string, request, session, url_for

from utils.session_gate import SessionGate

F = TypeVar("F", bound=Callable[..., Any])

LOGIN_PROMPT_HTML = """<!DOCTYPE html>
<html><head><meta charset="utf-8"><title>{{ institute }} - Login</title>
<meta name="viewport" content="width=device-width, initial-scale=1"></head>
<body style="font-family:Arial, sans-serif; max-width:420px; margin:60px auto;">
  <h2>{{ institute }}</h2>
  <p>{{ 'Admin access' if scope == 'admin' else 'Website access' }} requires a password.</p>
  <form method="POST" action="{{ login_url }}">
    <input type="password" name="password" placeholder="Password" required autofocus>
    <button type="submit">Login</button>
  </form>
</body></html>
"""


def get_gate(scope: str) -> SessionGate:
    cfg = current_app.config
    return SessionGate(
        scope,
        session,
        current_app.secret_key,
        max_age=cfg.get("SESSION_GATE_MAX_AGE"),
    )


def _wants_json() -> bool:
    if request.path.startswith("/api/"):
        return True
    best = request.accept_mimetypes.best_match(["application/json", "text/html"])
    return best == "application/json"


def gate_required(scope: str) -> Callable[[F], F]:
    """Decorator that renders the login prompt instead of the view while the
    ``scope`` gate is unauthenticated.

    JSON callers get ``401 {"message": ..., "login": <url>}``.
    """
    endpoint = "auth.admin_login" if scope == "admin" else "auth.login"

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            if get_gate(scope).is_authenticated:
                return func(*args, **kwargs)
            login_url = url_for(endpoint)
            if _wants_json():
                return jsonify({"message": "Authentication required", "login": login_url}), 401
            html = render_template_string(
                LOGIN_PROMPT_HTML,
                institute=current_app.config.get("INSTITUTE_NAME"),
                scope=scope,
                login_url=login_url,
            )
            return html, 401

        return cast(F, wrapper)

    return decorator


site_required = gate_required("site")
admin_required = gate_required("admin")
