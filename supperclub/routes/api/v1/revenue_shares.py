from flask import Blueprint, jsonify, request
from flask_login import login_required

from supperclub.decorators import role_required
from supperclub.errors import ValidationError
from supperclub.services import RevenueShareLedger

api_revenue_share_bp = Blueprint("api_revenue_share", __name__)


@api_revenue_share_bp.post("/payouts")
@login_required
@role_required("ADMIN")
def mark_paid():
    payload = request.get_json(silent=True) or {}
    share_ids = payload.get("share_ids")
    if not isinstance(share_ids, list):
        raise ValidationError("share_ids must be a list.")
    try:
        updated = RevenueShareLedger.mark_paid(share_ids)
    except (TypeError, ValueError) as exc:
        raise ValidationError("share_ids must contain integers.") from exc
    return jsonify({"updated": updated})
