from flask_login import UserMixin

from supperclub.extensions import db
from supperclub.models.base import PKType, TimestampMixin

USER_ROLES = ("USER", "HOST", "MODERATOR", "ADMIN")


class User(UserMixin, TimestampMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(PKType, primary_key=True, autoincrement=True)
    full_name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    role = db.Column(db.String(24), nullable=False, default="USER", index=True)
    referral_code = db.Column(db.String(16), nullable=True, unique=True)

    dinners = db.relationship("Dinner", back_populates="host", lazy="dynamic")
    bookings = db.relationship("Booking", back_populates="guest", lazy="dynamic")
    host_application = db.relationship(
        "HostApplication",
        back_populates="user",
        uselist=False,
        foreign_keys="HostApplication.user_id",
    )
    revenue_shares = db.relationship("RevenueShare", back_populates="moderator", lazy="dynamic")
