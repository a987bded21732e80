from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import case, func

from supperclub.errors import ValidationError
from supperclub.extensions import db
from supperclub.models import SHARE_STATUSES, SHARE_TYPES, RevenueShare, format_amount
from supperclub.services.share_calculator import AMOUNT_QUANTUM, BASE_PERCENTAGE


@dataclass
class RevenueTotals:
    total_pending: Decimal = field(default_factory=lambda: Decimal("0.00"))
    total_paid: Decimal = field(default_factory=lambda: Decimal("0.00"))
    total_amount: Decimal = field(default_factory=lambda: Decimal("0.00"))
    onboarding_total: Decimal = field(default_factory=lambda: Decimal("0.00"))
    referral_total: Decimal = field(default_factory=lambda: Decimal("0.00"))

    def to_dict(self):
        return {key: format_amount(value) for key, value in self.__dict__.items()}


class RevenueShareLedger:
    """Access to the append-mostly commission ledger.

    Rows are only ever inserted, except for the PENDING -> PAID flip done by
    the payout flow.
    """

    @staticmethod
    def record(moderator_id, booking_id, share_type, cohort_key, booking_number, actual_percentage, amount):
        share = RevenueShare(
            moderator_id=moderator_id,
            booking_id=booking_id,
            share_type=share_type,
            cohort_key=cohort_key,
            base_percentage=BASE_PERCENTAGE,
            booking_number=booking_number,
            actual_percentage=actual_percentage,
            amount=amount,
            status="PENDING",
        )
        db.session.add(share)
        db.session.flush()
        return share

    @staticmethod
    def find(booking_id, share_type):
        return RevenueShare.query.filter_by(booking_id=booking_id, share_type=share_type).first()

    @staticmethod
    def for_booking(booking_id):
        return RevenueShare.query.filter_by(booking_id=booking_id).order_by(RevenueShare.share_type.asc()).all()

    @staticmethod
    def list_for_moderator(moderator_id, status=None, share_type=None, start=None, end=None):
        if status is not None and status not in SHARE_STATUSES:
            raise ValidationError(f"Unknown revenue share status: {status}.")
        if share_type is not None and share_type not in SHARE_TYPES:
            raise ValidationError(f"Unknown revenue share type: {share_type}.")

        query = RevenueShare.query.filter(RevenueShare.moderator_id == moderator_id)
        if status:
            query = query.filter(RevenueShare.status == status)
        if share_type:
            query = query.filter(RevenueShare.share_type == share_type)
        if start:
            query = query.filter(RevenueShare.created_at >= start)
        if end:
            query = query.filter(RevenueShare.created_at <= end)
        return query.order_by(RevenueShare.created_at.desc(), RevenueShare.id.desc()).all()

    @staticmethod
    def totals(moderator_id):
        def amount_where(condition):
            return func.coalesce(func.sum(case((condition, RevenueShare.amount), else_=0)), 0)

        row = (
            db.session.query(
                amount_where(RevenueShare.status == "PENDING"),
                amount_where(RevenueShare.status == "PAID"),
                func.coalesce(func.sum(RevenueShare.amount), 0),
                amount_where(RevenueShare.share_type == "ONBOARDING"),
                amount_where(RevenueShare.share_type == "REFERRAL"),
            )
            .filter(RevenueShare.moderator_id == moderator_id)
            .one()
        )
        pending, paid, total, onboarding, referral = (Decimal(str(value)).quantize(AMOUNT_QUANTUM) for value in row)
        return RevenueTotals(
            total_pending=pending,
            total_paid=paid,
            total_amount=total,
            onboarding_total=onboarding,
            referral_total=referral,
        )

    @staticmethod
    def mark_paid(share_ids):
        ids = [int(share_id) for share_id in share_ids or []]
        if not ids:
            return 0
        updated = (
            RevenueShare.query.filter(RevenueShare.id.in_(ids))
            .filter(RevenueShare.status == "PENDING")
            .update({"status": "PAID", "paid_at": datetime.now(timezone.utc)}, synchronize_session="fetch")
        )
        db.session.commit()
        return updated
