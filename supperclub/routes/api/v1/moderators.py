from datetime import datetime

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from supperclub.decorators import role_required
from supperclub.errors import ValidationError
from supperclub.services import ModeratorService, ReferralCodeRegistry, RevenueShareLedger

api_moderator_bp = Blueprint("api_moderator", __name__)


def _parse_date(raw, name):
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw)
    except ValueError as exc:
        raise ValidationError(f"Invalid {name}.") from exc


@api_moderator_bp.get("/revenue")
@login_required
@role_required("MODERATOR", "ADMIN")
def revenue():
    shares = RevenueShareLedger.list_for_moderator(
        current_user.id,
        status=request.args.get("status") or None,
        share_type=request.args.get("share_type") or None,
        start=_parse_date(request.args.get("start_date"), "start_date"),
        end=_parse_date(request.args.get("end_date"), "end_date"),
    )
    return jsonify(
        {
            "revenue_shares": [share.to_dict() for share in shares],
            "totals": RevenueShareLedger.totals(current_user.id).to_dict(),
        }
    )


@api_moderator_bp.get("/stats")
@login_required
@role_required("MODERATOR", "ADMIN")
def stats():
    return jsonify({"stats": ModeratorService.stats(current_user.id)})


@api_moderator_bp.post("/referral-code")
@login_required
@role_required("MODERATOR")
def ensure_referral_code():
    return jsonify({"referral_code": ReferralCodeRegistry.ensure(current_user.id)})


@api_moderator_bp.post("/host-applications/<int:application_id>/decide")
@login_required
@role_required("MODERATOR", "ADMIN")
def decide_host_application(application_id):
    payload = request.get_json(silent=True) or {}
    application = ModeratorService.decide_host_application(
        application_id,
        reviewer=current_user,
        decision=payload.get("decision"),
        note=payload.get("note"),
    )
    return jsonify(
        {
            "id": application.id,
            "status": application.status,
            "onboarded_by_id": application.onboarded_by_id,
            "rejection_reason": application.rejection_reason,
        }
    )
