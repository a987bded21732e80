from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from supperclub.decorators import role_required
from supperclub.models import format_amount
from supperclub.services import BookingService, Created


def outcome_to_dict(outcome):
    if isinstance(outcome, Created):
        return {
            "share_type": outcome.share_type,
            "created": True,
            "share_id": outcome.share_id,
            "booking_number": outcome.booking_number,
            "amount": format_amount(outcome.amount),
        }
    return {"share_type": outcome.share_type, "created": False, "reason": outcome.reason.value}


api_booking_bp = Blueprint("api_booking", __name__)


@api_booking_bp.post("")
@login_required
def create_booking():
    payload = request.get_json(silent=True) or {}
    booking = BookingService.create_booking(
        guest_id=current_user.id,
        dinner_id=payload.get("dinner_id"),
        number_of_guests=payload.get("number_of_guests", 1),
        referral_code=payload.get("referral_code"),
    )
    return (
        jsonify(
            {
                "id": booking.id,
                "status": booking.status,
                "total_price": str(booking.total_price),
                "referral_code_used": booking.referral_code_used,
            }
        ),
        201,
    )


@api_booking_bp.post("/<int:booking_id>/confirm")
@login_required
@role_required("ADMIN")
def confirm_booking(booking_id):
    booking, outcomes = BookingService.confirm_booking(booking_id)
    return jsonify(
        {
            "id": booking.id,
            "status": booking.status,
            "revenue_shares": [outcome_to_dict(outcome) for outcome in outcomes],
        }
    )
