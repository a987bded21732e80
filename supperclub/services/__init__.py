from supperclub.services.booking_sequence import BookingSequenceCounter, Cohort
from supperclub.services.booking_service import BookingService
from supperclub.services.moderator_service import ModeratorService
from supperclub.services.referral_code_service import ReferralCodeRegistry
from supperclub.services.revenue_share_ledger import RevenueShareLedger, RevenueTotals
from supperclub.services.revenue_share_service import Created, RevenueShareProcessor, SkipReason, Skipped
from supperclub.services.share_calculator import ShareCalculator

__all__ = [
    "BookingSequenceCounter",
    "BookingService",
    "Cohort",
    "Created",
    "ModeratorService",
    "ReferralCodeRegistry",
    "RevenueShareLedger",
    "RevenueShareProcessor",
    "RevenueTotals",
    "ShareCalculator",
    "SkipReason",
    "Skipped",
]
