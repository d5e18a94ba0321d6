from decimal import Decimal

from flask import Blueprint, jsonify

from models import money
from routes import db_failure
from utils import site_required
from utils.metrics import collect_stats, derive_metrics

analytics_bp = Blueprint("analytics", __name__, url_prefix="/api")


@analytics_bp.route("/stats", methods=["GET"])
@site_required
@db_failure("Failed to fetch statistics")
def stats():
    counts = collect_stats()
    body = {k: money(v) if isinstance(v, Decimal) else v for k, v in counts.items()}
    body.update(derive_metrics(counts))
    return jsonify(body)
