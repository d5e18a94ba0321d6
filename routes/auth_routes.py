from flask import Blueprint, current_app, jsonify, request, session

from extensions import limiter
from routes import json_body
from utils import get_gate, site_required, admin_required
from utils.credentials import change_password, check_password

auth_bp = Blueprint("auth", __name__, url_prefix="/api")


def _password_from_request() -> str:
    data = json_body()
    password = data.get("password") if data else request.form.get("password")
    return (password or "").strip()


def _login(scope: str, success_message: str):
    password = _password_from_request()
    if not password:
        return jsonify({"message": "Password is required"}), 400
    gate = get_gate(scope)
    if gate.login(password, lambda candidate: check_password(scope, candidate)):
        # keep the cookie across browser restarts; the token itself expires
        session.permanent = True
        current_app.logger.info("%s login succeeded from %s", scope, request.remote_addr)
        return jsonify({"success": True, "message": success_message})
    current_app.logger.warning("%s login failed from %s", scope, request.remote_addr)
    return jsonify({"success": False, "message": "Invalid password"}), 401


@auth_bp.route("/auth/login", methods=["POST"])
@limiter.limit("10 per minute", methods=["POST"])
def login():
    """Website access login (shared site password)."""
    return _login("site", "Access granted")


@auth_bp.route("/auth/logout", methods=["POST"])
def logout():
    get_gate("site").logout()
    get_gate("admin").logout()
    return jsonify({"success": True, "message": "Logged out"})


@auth_bp.route("/auth/status", methods=["GET"])
def status():
    return jsonify(
        {
            "isAuthenticated": get_gate("site").is_authenticated,
            "isAdmin": get_gate("admin").is_authenticated,
        }
    )


@auth_bp.route("/admin/login", methods=["POST"])
@limiter.limit("10 per minute", methods=["POST"])
def admin_login():
    return _login("admin", "Login successful")


@auth_bp.route("/admin/logout", methods=["POST"])
def admin_logout():
    get_gate("admin").logout()
    return jsonify({"success": True, "message": "Logged out"})


def _change(scope: str):
    data = json_body()
    ok, code, message = change_password(
        scope,
        (data.get("currentPassword") or "").strip(),
        (data.get("newPassword") or "").strip(),
    )
    body = {"message": message}
    if ok:
        body["success"] = True
    return jsonify(body), code


@auth_bp.route("/auth/change-password", methods=["POST"])
@site_required
def change_site_password():
    return _change("site")


@auth_bp.route("/admin/change-password", methods=["POST"])
@admin_required
def change_admin_password():
    return _change("admin")
