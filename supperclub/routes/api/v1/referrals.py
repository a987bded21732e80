from flask import Blueprint, current_app, jsonify, request

from supperclub.errors import ValidationError
from supperclub.extensions import cache, limiter
from supperclub.models import format_amount
from supperclub.services import ReferralCodeRegistry, ShareCalculator

api_referral_bp = Blueprint("api_referral", __name__)


@api_referral_bp.get("/preview")
@cache.cached(query_string=True)
def preview():
    booking_number = request.args.get("booking_number", type=int)
    total_price = request.args.get("total_price", default="0")
    if booking_number is None:
        raise ValidationError("booking_number is required.")
    try:
        result = ShareCalculator.preview(booking_number, total_price)
    except ArithmeticError as exc:
        raise ValidationError("total_price must be a number.") from exc
    return jsonify(
        {
            "booking_number": result["booking_number"],
            "base_percentage": str(result["base_percentage"]),
            "actual_percentage": str(result["actual_percentage"]),
            "amount": format_amount(result["amount"]),
        }
    )


@api_referral_bp.get("/<code>")
@limiter.limit(lambda: current_app.config["REFERRAL_VALIDATE_LIMIT"])
def validate(code):
    moderator = ReferralCodeRegistry.validate(code)
    if not moderator:
        return jsonify({"valid": False}), 404
    return jsonify({"valid": True, "code": moderator.referral_code, "moderator_name": moderator.full_name})
