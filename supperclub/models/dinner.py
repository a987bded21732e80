from supperclub.extensions import db
from supperclub.models.base import PKType, TimestampMixin


class Dinner(TimestampMixin, db.Model):
    __tablename__ = "dinners"

    id = db.Column(PKType, primary_key=True, autoincrement=True)
    host_id = db.Column(PKType, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = db.Column(db.String(160), nullable=False)
    base_price_per_person = db.Column(db.Numeric(10, 2), nullable=False)

    host = db.relationship("User", back_populates="dinners")
    bookings = db.relationship("Booking", back_populates="dinner", lazy="dynamic")
