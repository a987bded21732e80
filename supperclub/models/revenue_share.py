from decimal import Decimal

from supperclub.extensions import db
from supperclub.models.base import PKType, TimestampMixin

SHARE_TYPES = ("ONBOARDING", "REFERRAL")
SHARE_STATUSES = ("PENDING", "PAID")
CENTS = Decimal("0.01")


def format_amount(amount):
    """Render whole-cent amounts with two decimals and sub-cent ones in full."""
    amount = Decimal(str(amount or 0))
    cents = amount.quantize(CENTS)
    if cents == amount:
        return str(cents)
    return str(amount.normalize())


class RevenueShare(TimestampMixin, db.Model):
    __tablename__ = "revenue_shares"

    id = db.Column(PKType, primary_key=True, autoincrement=True)
    moderator_id = db.Column(PKType, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    booking_id = db.Column(PKType, db.ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    share_type = db.Column(db.String(16), nullable=False)
    # Host id for ONBOARDING, referral code for REFERRAL.
    cohort_key = db.Column(db.String(64), nullable=False)
    base_percentage = db.Column(db.Numeric(5, 2), nullable=False)
    booking_number = db.Column(db.Integer, nullable=False)
    actual_percentage = db.Column(db.Numeric(5, 2), nullable=False)
    amount = db.Column(db.Numeric(16, 5), nullable=False)
    status = db.Column(db.String(16), nullable=False, default="PENDING", index=True)
    paid_at = db.Column(db.DateTime(timezone=True), nullable=True)

    moderator = db.relationship("User", back_populates="revenue_shares")
    booking = db.relationship("Booking", back_populates="revenue_shares")

    __table_args__ = (
        db.UniqueConstraint("booking_id", "share_type", name="uq_revenue_share_booking_type"),
        db.UniqueConstraint("share_type", "cohort_key", "booking_number", name="uq_revenue_share_cohort_number"),
        db.Index("ix_revenue_shares_moderator_status", "moderator_id", "status"),
        db.CheckConstraint("booking_number >= 1", name="ck_revenue_share_booking_number"),
        db.CheckConstraint("actual_percentage >= 0", name="ck_revenue_share_percentage"),
        db.CheckConstraint("amount > 0", name="ck_revenue_share_amount_positive"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "moderator_id": self.moderator_id,
            "booking_id": self.booking_id,
            "share_type": self.share_type,
            "base_percentage": str(self.base_percentage),
            "booking_number": self.booking_number,
            "actual_percentage": str(self.actual_percentage),
            "amount": format_amount(self.amount),
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "paid_at": self.paid_at.isoformat() if self.paid_at else None,
        }
