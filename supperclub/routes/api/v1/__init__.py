from flask import Blueprint

from supperclub.routes.api.v1.bookings import api_booking_bp
from supperclub.routes.api.v1.moderators import api_moderator_bp
from supperclub.routes.api.v1.referrals import api_referral_bp
from supperclub.routes.api.v1.revenue_shares import api_revenue_share_bp

api_v1_bp = Blueprint("api_v1", __name__)
api_v1_bp.register_blueprint(api_booking_bp, url_prefix="/bookings")
api_v1_bp.register_blueprint(api_moderator_bp, url_prefix="/moderators")
api_v1_bp.register_blueprint(api_referral_bp, url_prefix="/referrals")
api_v1_bp.register_blueprint(api_revenue_share_bp, url_prefix="/revenue-shares")
