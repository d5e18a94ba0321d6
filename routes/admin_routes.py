from flask import Blueprint, current_app, jsonify

from routes import db_failure, json_body
from utils import admin_required, site_required
from utils.settings import all_settings, get_setting_row, set_setting
from utils.validation import clean_setting

admin_bp = Blueprint("admin", __name__, url_prefix="/api/settings")


@admin_bp.route("", methods=["GET"])
@site_required
@db_failure("Failed to fetch settings")
def list_settings():
    return jsonify([s.to_dict() for s in all_settings()])


@admin_bp.route("/<key>", methods=["GET"])
@site_required
@db_failure("Failed to fetch setting")
def get_setting(key):
    row = get_setting_row(key)
    if row is None:
        return jsonify({"message": "Setting not found"}), 404
    return jsonify(row.to_dict())


@admin_bp.route("/<key>", methods=["PUT"])
@admin_required
@db_failure("Failed to save setting")
def put_setting(key):
    data = clean_setting(json_body())
    row = set_setting(key, data["value"], data.get("description"))
    current_app.logger.info("Setting %s updated", key)
    return jsonify(row.to_dict())
