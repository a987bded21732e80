from supperclub.extensions import db
from supperclub.models.base import PKType, TimestampMixin


class Booking(TimestampMixin, db.Model):
    __tablename__ = "bookings"

    id = db.Column(PKType, primary_key=True, autoincrement=True)
    dinner_id = db.Column(PKType, db.ForeignKey("dinners.id", ondelete="CASCADE"), nullable=False, index=True)
    guest_id = db.Column(PKType, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    status = db.Column(db.String(16), nullable=False, default="PENDING", index=True)
    number_of_guests = db.Column(db.Integer, nullable=False, default=1)
    total_price = db.Column(db.Numeric(12, 2), nullable=False)
    # Copy of the code captured at booking time, not a foreign key.
    referral_code_used = db.Column(db.String(16), nullable=True, index=True)
    confirmed_at = db.Column(db.DateTime(timezone=True), nullable=True)

    dinner = db.relationship("Dinner", back_populates="bookings")
    guest = db.relationship("User", back_populates="bookings")
    revenue_shares = db.relationship("RevenueShare", back_populates="booking", lazy="dynamic")

    __table_args__ = (
        db.Index("ix_bookings_referral_status", "referral_code_used", "status"),
        db.CheckConstraint("number_of_guests > 0", name="ck_booking_guests_positive"),
    )
