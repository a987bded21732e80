import re
import secrets

from flask import current_app
from sqlalchemy.exc import IntegrityError

from supperclub.errors import GenerationExhausted, NotFoundError
from supperclub.extensions import db
from supperclub.models import User
from supperclub.services.booking_sequence import BookingSequenceCounter, Cohort

# No 0, O, I or 1: codes get read out loud and typed by hand.
CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CODE_PREFIX = "MOD-"
CODE_LENGTH = 4
CODE_PATTERN = re.compile(r"^MOD-[A-HJ-NP-Z2-9]{4}$")


class ReferralCodeRegistry:
    @staticmethod
    def _max_attempts():
        return int(current_app.config.get("REFERRAL_CODE_MAX_ATTEMPTS", 10))

    @staticmethod
    def _random_code():
        return CODE_PREFIX + "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))

    @staticmethod
    def is_well_formed(code):
        return bool(code) and CODE_PATTERN.match(code) is not None

    @staticmethod
    def generate():
        """Return a code not currently held by any user.

        Only a hint: the unique constraint on ``users.referral_code`` is what
        guarantees uniqueness, see ``ensure``.
        """
        for _ in range(ReferralCodeRegistry._max_attempts()):
            code = ReferralCodeRegistry._random_code()
            if not User.query.filter_by(referral_code=code).first():
                return code
        raise GenerationExhausted("Could not generate a unique referral code.")

    @staticmethod
    def _assign(user):
        max_attempts = ReferralCodeRegistry._max_attempts()
        for attempt in range(1, max_attempts + 1):
            code = ReferralCodeRegistry._random_code()
            try:
                with db.session.begin_nested():
                    user.referral_code = code
            except IntegrityError:
                current_app.logger.warning(
                    "Referral code collision for user %s (attempt %s/%s)", user.id, attempt, max_attempts
                )
                continue
            return code
        raise GenerationExhausted("Could not generate a unique referral code.")

    @staticmethod
    def assign_pending(user):
        """Give ``user`` a code and open its referral cohort in the caller's transaction.

        Nothing is committed, so the assignment lands or rolls back together
        with the rest of the caller's unit of work.
        """
        if user.referral_code:
            return user.referral_code
        code = ReferralCodeRegistry._assign(user)
        BookingSequenceCounter.open_cohort(Cohort.referral(code))
        return code

    @staticmethod
    def ensure(user_id):
        user = db.session.get(User, user_id)
        if not user:
            raise NotFoundError("User not found.")
        if user.referral_code:
            return user.referral_code

        try:
            code = ReferralCodeRegistry.assign_pending(user)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        current_app.logger.info("Assigned referral code %s to user %s", code, user.id)
        return code

    @staticmethod
    def validate(code):
        """Return the moderator owning ``code``, or None."""
        code = (code or "").strip()
        if not ReferralCodeRegistry.is_well_formed(code):
            return None
        return User.query.filter_by(referral_code=code, role="MODERATOR").first()
