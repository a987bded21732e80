from datetime import datetime, timezone

from flask import current_app

from supperclub.errors import AppError, NotFoundError, ValidationError
from supperclub.extensions import db
from supperclub.models import HostApplication, User
from supperclub.services.booking_sequence import BookingSequenceCounter, Cohort
from supperclub.services.referral_code_service import ReferralCodeRegistry
from supperclub.services.revenue_share_ledger import RevenueShareLedger

DECISIONS = {"APPROVE": "APPROVED", "REJECT": "REJECTED"}


class ModeratorService:
    @staticmethod
    def decide_host_application(application_id, reviewer, decision, note=None):
        next_status = DECISIONS.get((decision or "").strip().upper())
        if not next_status:
            raise ValidationError("Decision must be APPROVE or REJECT.")

        try:
            application = db.session.get(HostApplication, application_id)
            if not application:
                raise NotFoundError("Application not found.")
            if application.status != "PENDING":
                raise AppError("Application has already been reviewed.", 400)

            application.status = next_status
            application.reviewed_by_id = reviewer.id
            application.reviewed_at = datetime.now(timezone.utc)
            application.rejection_reason = None
            if next_status == "REJECTED":
                application.rejection_reason = (note or "").strip() or None

            if next_status == "APPROVED":
                applicant = db.session.get(User, application.user_id)
                applicant.role = "HOST"
            # Moderators need a code before their first host goes live; it must
            # commit with the decision while the PENDING check still holds.
            if reviewer.role == "MODERATOR":
                ReferralCodeRegistry.assign_pending(db.session.get(User, reviewer.id))
                if next_status == "APPROVED":
                    application.onboarded_by_id = reviewer.id
                    BookingSequenceCounter.open_cohort(Cohort.onboarding(application.user_id))

            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info("Host application %s %s by user %s", application_id, next_status.lower(), reviewer.id)
        return application

    @staticmethod
    def stats(moderator_id):
        moderator = db.session.get(User, moderator_id)
        if not moderator:
            raise NotFoundError("User not found.")

        onboarded_host_ids = [
            row.user_id
            for row in HostApplication.query.with_entities(HostApplication.user_id)
            .filter_by(onboarded_by_id=moderator_id, status="APPROVED")
            .all()
        ]
        total_onboarding_bookings = sum(
            BookingSequenceCounter.count_confirmed(Cohort.onboarding(host_id)) for host_id in onboarded_host_ids
        )
        return {
            "hosts_onboarded": len(onboarded_host_ids),
            "total_onboarding_bookings": total_onboarding_bookings,
            "total_referral_bookings": BookingSequenceCounter.count_confirmed_for_referral_code(moderator_id),
            "referral_code": moderator.referral_code,
            "revenue": RevenueShareLedger.totals(moderator_id).to_dict(),
        }
