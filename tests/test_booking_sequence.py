from supperclub.extensions import db
from supperclub.models import CohortCounter, CohortOrdinal
from supperclub.services import BookingSequenceCounter, Cohort


def test_count_confirmed_only_counts_confirmed_bookings_of_the_host(app_ctx, factory):
    host = factory.host()
    other_host = factory.host()
    dinner = factory.dinner(host)
    factory.booking(dinner)
    factory.booking(dinner)
    factory.booking(dinner, status="PENDING")
    factory.booking(dinner, status="CANCELLED")
    factory.booking(factory.dinner(other_host))

    assert BookingSequenceCounter.count_confirmed(Cohort.onboarding(host.id)) == 2
    assert BookingSequenceCounter.count_confirmed_for_host(host.id) == 2
    assert BookingSequenceCounter.count_confirmed_for_host(other_host.id) == 1


def test_count_confirmed_can_exclude_a_booking(app_ctx, factory):
    host = factory.host()
    dinner = factory.dinner(host)
    first = factory.booking(dinner)
    factory.booking(dinner)

    cohort = Cohort.onboarding(host.id)
    assert BookingSequenceCounter.count_confirmed(cohort, exclude_booking_id=first.id) == 1


def test_count_confirmed_for_referral_code_uses_moderators_current_code(app_ctx, factory):
    moderator = factory.moderator(referral_code="MOD-REFA")
    dinner = factory.dinner(factory.host())
    factory.booking(dinner, referral_code_used="MOD-REFA")
    factory.booking(dinner, referral_code_used="MOD-REFA")
    factory.booking(dinner, referral_code_used="MOD-REFA", status="PENDING")
    factory.booking(dinner, referral_code_used="MOD-QTHR")

    assert BookingSequenceCounter.count_confirmed_for_referral_code(moderator.id) == 2
    assert BookingSequenceCounter.count_confirmed(Cohort.referral("MOD-QTHR")) == 1


def test_count_confirmed_for_referral_code_without_code_is_zero(app_ctx, factory):
    moderator = factory.moderator()

    assert BookingSequenceCounter.count_confirmed_for_referral_code(moderator.id) == 0
    assert BookingSequenceCounter.count_confirmed_for_referral_code(999) == 0


def test_assign_ordinal_hands_out_dense_sequence(app_ctx, factory):
    host = factory.host()
    dinner = factory.dinner(host)
    cohort = Cohort.onboarding(host.id)
    BookingSequenceCounter.open_cohort(cohort)
    db.session.commit()

    ordinals = []
    for _ in range(4):
        booking = factory.booking(dinner)
        ordinals.append(BookingSequenceCounter.assign_ordinal(cohort, booking.id))
        db.session.commit()

    assert ordinals == [1, 2, 3, 4]
    assert CohortCounter.query.filter_by(share_type="ONBOARDING", cohort_key=str(host.id)).one().last_ordinal == 4
    assert CohortOrdinal.query.count() == 4


def test_lazily_opened_cohort_is_seeded_from_booking_history(app_ctx, factory):
    host = factory.host()
    dinner = factory.dinner(host)
    factory.booking(dinner)
    factory.booking(dinner)
    current = factory.booking(dinner)

    ordinal = BookingSequenceCounter.assign_ordinal(Cohort.onboarding(host.id), current.id)
    db.session.commit()

    assert ordinal == 3


def test_open_cohort_is_idempotent(app_ctx, factory):
    cohort = Cohort.referral("MOD-QPEN")

    first = BookingSequenceCounter.open_cohort(cohort)
    second = BookingSequenceCounter.open_cohort(cohort)
    db.session.commit()

    assert first.id == second.id
    assert CohortCounter.query.filter_by(share_type="REFERRAL", cohort_key="MOD-QPEN").count() == 1


def test_cohorts_of_different_types_are_independent(app_ctx, factory):
    host = factory.host()
    dinner = factory.dinner(host)
    booking = factory.booking(dinner, referral_code_used=str(host.id))

    onboarding = BookingSequenceCounter.assign_ordinal(Cohort.onboarding(host.id), booking.id)
    referral = BookingSequenceCounter.assign_ordinal(Cohort.referral(str(host.id)), booking.id)
    db.session.commit()

    assert onboarding == 1
    assert referral == 1


def test_ordinal_for_returns_assigned_number(app_ctx, factory):
    host = factory.host()
    booking = factory.booking(factory.dinner(host))

    assert BookingSequenceCounter.ordinal_for("ONBOARDING", booking.id) is None
    BookingSequenceCounter.assign_ordinal(Cohort.onboarding(host.id), booking.id)
    db.session.commit()

    assert BookingSequenceCounter.ordinal_for("ONBOARDING", booking.id) == 1
    assert BookingSequenceCounter.ordinal_for("REFERRAL", booking.id) is None
