from supperclub.extensions import db
from supperclub.models.base import PKType, TimestampMixin


class HostApplication(TimestampMixin, db.Model):
    __tablename__ = "host_applications"

    id = db.Column(PKType, primary_key=True, autoincrement=True)
    user_id = db.Column(PKType, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    status = db.Column(db.String(16), nullable=False, default="PENDING", index=True)
    onboarded_by_id = db.Column(PKType, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    reviewed_by_id = db.Column(PKType, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reviewed_at = db.Column(db.DateTime(timezone=True), nullable=True)
    rejection_reason = db.Column(db.Text, nullable=True)

    user = db.relationship("User", back_populates="host_application", foreign_keys=[user_id])
    onboarded_by = db.relationship("User", foreign_keys=[onboarded_by_id])
    reviewed_by = db.relationship("User", foreign_keys=[reviewed_by_id])

    @property
    def is_onboarding_eligible(self):
        return self.status == "APPROVED" and self.onboarded_by_id is not None
