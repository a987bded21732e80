from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from supperclub.errors import ValidationError
from supperclub.extensions import db
from supperclub.models import RevenueShare, format_amount
from supperclub.services import RevenueShareLedger


@pytest.fixture
def moderator_with_shares(app_ctx, factory):
    moderator = factory.moderator()
    other = factory.moderator()
    host = factory.host()
    dinner = factory.dinner(host)

    def add(share_type, amount, status="PENDING", owner=moderator, number=None):
        booking = factory.booking(dinner)
        share = RevenueShareLedger.record(
            moderator_id=owner.id,
            booking_id=booking.id,
            share_type=share_type,
            cohort_key=str(host.id) if share_type == "ONBOARDING" else "MOD-LDGR",
            booking_number=number or booking.id,
            actual_percentage=Decimal("5.0"),
            amount=Decimal(amount),
        )
        share.status = status
        db.session.commit()
        return share

    shares = [
        add("ONBOARDING", "50.00"),
        add("ONBOARDING", "49.00", status="PAID"),
        add("REFERRAL", "10.00"),
        add("REFERRAL", "7.50", owner=other),
    ]
    return moderator, other, shares


def test_record_creates_pending_row_with_base_percentage(app_ctx, factory):
    moderator = factory.moderator()
    host = factory.host()
    booking = factory.booking(factory.dinner(host))

    share = RevenueShareLedger.record(
        moderator_id=moderator.id,
        booking_id=booking.id,
        share_type="ONBOARDING",
        cohort_key=str(host.id),
        booking_number=1,
        actual_percentage=Decimal("5.0"),
        amount=Decimal("50.00"),
    )
    db.session.commit()

    assert share.status == "PENDING"
    assert share.base_percentage == Decimal("5.0")
    assert RevenueShareLedger.find(booking.id, "ONBOARDING").id == share.id
    assert RevenueShareLedger.find(booking.id, "REFERRAL") is None
    assert [row.id for row in RevenueShareLedger.for_booking(booking.id)] == [share.id]


def test_list_for_moderator_filters(moderator_with_shares):
    moderator, other, _ = moderator_with_shares

    assert len(RevenueShareLedger.list_for_moderator(moderator.id)) == 3
    assert len(RevenueShareLedger.list_for_moderator(moderator.id, status="PAID")) == 1
    assert len(RevenueShareLedger.list_for_moderator(moderator.id, share_type="REFERRAL")) == 1
    assert len(RevenueShareLedger.list_for_moderator(other.id)) == 1


def test_list_for_moderator_filters_by_date(moderator_with_shares):
    moderator, _, _ = moderator_with_shares
    now = datetime.now(timezone.utc)

    assert len(RevenueShareLedger.list_for_moderator(moderator.id, start=now - timedelta(days=1))) == 3
    assert RevenueShareLedger.list_for_moderator(moderator.id, end=now - timedelta(days=1)) == []


@pytest.mark.parametrize("kwargs", [{"status": "CANCELLED"}, {"share_type": "BONUS"}])
def test_list_for_moderator_rejects_unknown_filters(app_ctx, kwargs):
    with pytest.raises(ValidationError):
        RevenueShareLedger.list_for_moderator(1, **kwargs)


def test_totals(moderator_with_shares):
    moderator, other, _ = moderator_with_shares

    totals = RevenueShareLedger.totals(moderator.id)

    assert totals.total_pending == Decimal("60.00")
    assert totals.total_paid == Decimal("49.00")
    assert totals.total_amount == Decimal("109.00")
    assert totals.onboarding_total == Decimal("99.00")
    assert totals.referral_total == Decimal("10.00")
    assert RevenueShareLedger.totals(other.id).total_amount == Decimal("7.50")


def test_totals_for_moderator_without_shares_are_zero(app_ctx, factory):
    totals = RevenueShareLedger.totals(factory.moderator().id)

    assert totals.to_dict() == {
        "total_pending": "0.00",
        "total_paid": "0.00",
        "total_amount": "0.00",
        "onboarding_total": "0.00",
        "referral_total": "0.00",
    }


def test_mark_paid_only_moves_pending_rows(moderator_with_shares):
    _, _, shares = moderator_with_shares
    ids = [share.id for share in shares]

    assert RevenueShareLedger.mark_paid(ids) == 3
    assert RevenueShareLedger.mark_paid(ids) == 0
    assert RevenueShareLedger.mark_paid([]) == 0

    rows = RevenueShare.query.all()
    assert {row.status for row in rows} == {"PAID"}
    assert all(row.paid_at is not None for row in rows if row.id != ids[1])


@pytest.mark.parametrize(
    "amount, rendered",
    [
        (Decimal("50.00000"), "50.00"),
        (Decimal("0.00500"), "0.005"),
        (Decimal("6.04905"), "6.04905"),
        (Decimal("0"), "0.00"),
        (None, "0.00"),
    ],
)
def test_format_amount(amount, rendered):
    assert format_amount(amount) == rendered
