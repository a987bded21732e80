from supperclub.extensions import db
from supperclub.models.base import PKType, TimestampMixin


class CohortCounter(TimestampMixin, db.Model):
    """Hands out booking numbers for one cohort; incremented atomically."""

    __tablename__ = "cohort_counters"

    id = db.Column(PKType, primary_key=True, autoincrement=True)
    share_type = db.Column(db.String(16), nullable=False)
    cohort_key = db.Column(db.String(64), nullable=False)
    last_ordinal = db.Column(db.Integer, nullable=False, default=0)

    __table_args__ = (
        db.UniqueConstraint("share_type", "cohort_key", name="uq_cohort_counter"),
        db.CheckConstraint("last_ordinal >= 0", name="ck_cohort_counter_non_negative"),
    )


class CohortOrdinal(TimestampMixin, db.Model):
    __tablename__ = "cohort_ordinals"

    id = db.Column(PKType, primary_key=True, autoincrement=True)
    share_type = db.Column(db.String(16), nullable=False)
    cohort_key = db.Column(db.String(64), nullable=False)
    booking_id = db.Column(PKType, db.ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    ordinal = db.Column(db.Integer, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("share_type", "booking_id", name="uq_cohort_ordinal_booking"),
        db.UniqueConstraint("share_type", "cohort_key", "ordinal", name="uq_cohort_ordinal_position"),
        db.CheckConstraint("ordinal >= 1", name="ck_cohort_ordinal_positive"),
    )
