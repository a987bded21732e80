from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from flask import current_app
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from supperclub.errors import NotFoundError
from supperclub.extensions import db
from supperclub.models import Booking, Dinner, User
from supperclub.services.booking_sequence import BookingSequenceCounter, Cohort
from supperclub.services.referral_code_service import ReferralCodeRegistry
from supperclub.services.revenue_share_ledger import RevenueShareLedger
from supperclub.services.share_calculator import ShareCalculator


class SkipReason(str, Enum):
    BOOKING_NOT_CONFIRMED = "booking_not_confirmed"
    HOST_NOT_ONBOARDED = "host_not_onboarded"
    NO_REFERRAL_CODE = "no_referral_code"
    UNKNOWN_REFERRER = "unknown_referrer"
    ZERO_AMOUNT = "zero_amount"
    ALREADY_PROCESSED = "already_processed"


@dataclass(frozen=True)
class Created:
    share_type: str
    share_id: int
    booking_number: int
    amount: Decimal


@dataclass(frozen=True)
class Skipped:
    share_type: str
    reason: SkipReason


class RevenueShareProcessor:
    @staticmethod
    def _load_booking(booking_id):
        booking = (
            Booking.query.options(
                joinedload(Booking.dinner).joinedload(Dinner.host).joinedload(User.host_application)
            )
            .filter(Booking.id == booking_id)
            .first()
        )
        if not booking:
            raise NotFoundError("Booking not found.")
        return booking

    @staticmethod
    def _record_share(booking, moderator_id, cohort):
        """Sequence ``booking`` in ``cohort`` and write its ledger row.

        One unit of work: the ordinal, its bookkeeping row and the ledger row
        commit together or not at all.
        """
        booking_id = booking.id
        total_price = booking.total_price
        try:
            if BookingSequenceCounter.ordinal_for(cohort.share_type, booking_id) is not None:
                db.session.rollback()
                return Skipped(cohort.share_type, SkipReason.ALREADY_PROCESSED)

            booking_number = BookingSequenceCounter.assign_ordinal(cohort, booking_id)
            percentage = ShareCalculator.calculate_share(booking_number)
            amount = ShareCalculator.share_amount(total_price, percentage)
            if amount <= 0:
                db.session.commit()
                return Skipped(cohort.share_type, SkipReason.ZERO_AMOUNT)

            share = RevenueShareLedger.record(
                moderator_id=moderator_id,
                booking_id=booking_id,
                share_type=cohort.share_type,
                cohort_key=cohort.key,
                booking_number=booking_number,
                actual_percentage=percentage,
                amount=amount,
            )
            share_id = share.id
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            current_app.logger.warning(
                "Revenue share %s for booking %s was recorded concurrently; skipping", cohort.share_type, booking_id
            )
            return Skipped(cohort.share_type, SkipReason.ALREADY_PROCESSED)
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(
            "Recorded %s revenue share %s for booking %s: moderator=%s number=%s amount=%s",
            cohort.share_type,
            share_id,
            booking_id,
            moderator_id,
            booking_number,
            amount,
        )
        return Created(cohort.share_type, share_id, booking_number, amount)

    @staticmethod
    def _process_onboarding(booking):
        host = booking.dinner.host
        application = host.host_application
        if not application or not application.is_onboarding_eligible:
            return Skipped("ONBOARDING", SkipReason.HOST_NOT_ONBOARDED)
        return RevenueShareProcessor._record_share(
            booking, application.onboarded_by_id, Cohort.onboarding(host.id)
        )

    @staticmethod
    def _process_referral(booking):
        code = booking.referral_code_used
        if not code:
            return Skipped("REFERRAL", SkipReason.NO_REFERRAL_CODE)
        moderator = ReferralCodeRegistry.validate(code)
        if not moderator:
            return Skipped("REFERRAL", SkipReason.UNKNOWN_REFERRER)
        return RevenueShareProcessor._record_share(booking, moderator.id, Cohort.referral(code))

    @staticmethod
    def process(booking_id):
        """Record the commission owed for a confirmed booking.

        Safe to call for any booking status and any number of times: a
        booking that is not CONFIRMED, or whose shares were already recorded,
        produces only ``Skipped`` outcomes. Returns one outcome per share type.
        """
        booking = RevenueShareProcessor._load_booking(booking_id)
        if booking.status != "CONFIRMED":
            return [
                Skipped("ONBOARDING", SkipReason.BOOKING_NOT_CONFIRMED),
                Skipped("REFERRAL", SkipReason.BOOKING_NOT_CONFIRMED),
            ]

        onboarding = RevenueShareProcessor._process_onboarding(booking)
        booking = RevenueShareProcessor._load_booking(booking_id)
        referral = RevenueShareProcessor._process_referral(booking)
        return [onboarding, referral]
