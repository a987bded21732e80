from dataclasses import dataclass

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from supperclub.extensions import db
from supperclub.models import Booking, CohortCounter, CohortOrdinal, Dinner, User


@dataclass(frozen=True)
class Cohort:
    """Group of bookings whose shares decay together.

    ONBOARDING cohorts are keyed by host id, REFERRAL cohorts by the referral
    code string captured on the booking.
    """

    share_type: str
    key: str

    @classmethod
    def onboarding(cls, host_id):
        return cls("ONBOARDING", str(host_id))

    @classmethod
    def referral(cls, code):
        return cls("REFERRAL", code)


class BookingSequenceCounter:
    @staticmethod
    def _confirmed_bookings(cohort):
        query = Booking.query.filter(Booking.status == "CONFIRMED")
        if cohort.share_type == "ONBOARDING":
            return query.join(Dinner, Dinner.id == Booking.dinner_id).filter(Dinner.host_id == int(cohort.key))
        return query.filter(Booking.referral_code_used == cohort.key)

    @staticmethod
    def count_confirmed(cohort, exclude_booking_id=None):
        query = BookingSequenceCounter._confirmed_bookings(cohort)
        if exclude_booking_id is not None:
            query = query.filter(Booking.id != exclude_booking_id)
        return query.count()

    @staticmethod
    def count_confirmed_for_host(host_id):
        return BookingSequenceCounter.count_confirmed(Cohort.onboarding(host_id))

    @staticmethod
    def count_confirmed_for_referral_code(moderator_id):
        moderator = db.session.get(User, moderator_id)
        if not moderator or not moderator.referral_code:
            return 0
        return BookingSequenceCounter.count_confirmed(Cohort.referral(moderator.referral_code))

    @staticmethod
    def _counter_for(cohort):
        return CohortCounter.query.filter_by(share_type=cohort.share_type, cohort_key=cohort.key).first()

    @staticmethod
    def open_cohort(cohort, exclude_booking_id=None):
        """Create the cohort's counter if missing, seeded from booking history.

        Does not commit. A concurrent writer creating the same counter is
        absorbed by the unique constraint; its row wins.
        """
        counter = BookingSequenceCounter._counter_for(cohort)
        if counter:
            return counter

        seed = BookingSequenceCounter.count_confirmed(cohort, exclude_booking_id=exclude_booking_id)
        try:
            with db.session.begin_nested():
                counter = CohortCounter(share_type=cohort.share_type, cohort_key=cohort.key, last_ordinal=seed)
                db.session.add(counter)
        except IntegrityError:
            counter = BookingSequenceCounter._counter_for(cohort)
        return counter

    @staticmethod
    def ordinal_for(share_type, booking_id):
        row = CohortOrdinal.query.filter_by(share_type=share_type, booking_id=booking_id).first()
        return row.ordinal if row else None

    @staticmethod
    def assign_ordinal(cohort, booking_id):
        """Hand out the next booking number of ``cohort`` to ``booking_id``.

        The increment is a single ``UPDATE ... RETURNING`` so two writers can
        never read the same value. Must run inside the caller's transaction;
        nothing is committed here.
        """
        BookingSequenceCounter.open_cohort(cohort, exclude_booking_id=booking_id)
        ordinal = db.session.execute(
            update(CohortCounter)
            .where(CohortCounter.share_type == cohort.share_type, CohortCounter.cohort_key == cohort.key)
            .values(last_ordinal=CohortCounter.last_ordinal + 1)
            .returning(CohortCounter.last_ordinal)
        ).scalar_one()
        db.session.add(
            CohortOrdinal(
                share_type=cohort.share_type,
                cohort_key=cohort.key,
                booking_id=booking_id,
                ordinal=ordinal,
            )
        )
        db.session.flush()
        return ordinal
