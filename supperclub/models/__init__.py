from supperclub.models.booking import Booking
from supperclub.models.cohort import CohortCounter, CohortOrdinal
from supperclub.models.dinner import Dinner
from supperclub.models.host_application import HostApplication
from supperclub.models.revenue_share import SHARE_STATUSES, SHARE_TYPES, RevenueShare, format_amount
from supperclub.models.user import USER_ROLES, User

__all__ = [
    "User",
    "HostApplication",
    "Dinner",
    "Booking",
    "RevenueShare",
    "CohortCounter",
    "CohortOrdinal",
    "SHARE_TYPES",
    "SHARE_STATUSES",
    "format_amount",
    "USER_ROLES",
]
