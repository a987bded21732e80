from datetime import datetime, timezone
from decimal import Decimal

from flask import current_app

from supperclub.errors import AppError, NotFoundError, ValidationError
from supperclub.extensions import db
from supperclub.models import Booking, Dinner
from supperclub.services.referral_code_service import ReferralCodeRegistry
from supperclub.services.revenue_share_service import RevenueShareProcessor


class BookingService:
    @staticmethod
    def create_booking(guest_id, dinner_id, number_of_guests, referral_code=None):
        dinner = db.session.get(Dinner, dinner_id)
        if not dinner:
            raise NotFoundError("Dinner not found.")

        try:
            guests = int(number_of_guests)
            if guests <= 0:
                raise ValueError
        except (TypeError, ValueError) as exc:
            raise ValidationError("Number of guests must be a positive integer.") from exc

        referral_code_used = None
        code = (referral_code or "").strip()
        if code:
            if not ReferralCodeRegistry.validate(code):
                raise AppError("Invalid referral code.", 400)
            referral_code_used = code

        total = (Decimal(str(dinner.base_price_per_person)) * Decimal(guests)).quantize(Decimal("0.01"))
        booking = Booking(
            dinner_id=dinner.id,
            guest_id=guest_id,
            number_of_guests=guests,
            total_price=total,
            referral_code_used=referral_code_used,
            status="PENDING",
        )
        db.session.add(booking)
        db.session.commit()
        return booking

    @staticmethod
    def confirm_booking(booking_id):
        """Mark a booking paid and record the moderator commissions it earns.

        The confirmation is committed before revenue processing runs, so a
        failure there leaves the booking CONFIRMED and the call can be retried.
        """
        booking = db.session.get(Booking, booking_id)
        if not booking:
            raise NotFoundError("Booking not found.")
        if booking.status not in {"PENDING", "CONFIRMED"}:
            raise AppError(f"Cannot confirm a {booking.status.lower()} booking.", 409)

        if booking.status == "PENDING":
            booking.status = "CONFIRMED"
            booking.confirmed_at = datetime.now(timezone.utc)
            db.session.commit()

        try:
            outcomes = RevenueShareProcessor.process(booking_id)
        except Exception as exc:
            db.session.rollback()
            current_app.logger.exception("Error processing revenue shares for booking %s", booking_id)
            raise AppError("Failed to process booking revenue shares.", 500) from exc
        return db.session.get(Booking, booking_id), outcomes
