from decimal import ROUND_UP, Decimal

from supperclub.errors import ValidationError

BASE_PERCENTAGE = Decimal("5.0")
DECAY_PER_BOOKING = Decimal("0.1")
# Prices carry two decimals and percentages one, so commissions are exact at five.
AMOUNT_QUANTUM = Decimal("0.00001")


class ShareCalculator:
    """Decaying commission curve shared by onboarding and referral shares.

    The first booking in a cohort earns ``BASE_PERCENTAGE``; every later one
    earns ``DECAY_PER_BOOKING`` less, floored at zero from booking 51 onwards.
    """

    @staticmethod
    def calculate_share(booking_number):
        if isinstance(booking_number, bool) or not isinstance(booking_number, int):
            raise ValidationError("Booking number must be an integer.")
        if booking_number < 1:
            raise ValidationError("Booking number must be at least 1.")
        percentage = BASE_PERCENTAGE - (booking_number - 1) * DECAY_PER_BOOKING
        return max(Decimal("0"), percentage)

    @staticmethod
    def share_amount(total_price, percentage):
        """Commission owed, unrounded for stored prices.

        Finer-grained inputs are rounded away from zero, so a positive
        commission never collapses to 0.
        """
        total = Decimal(str(total_price or 0))
        return (total * Decimal(str(percentage)) / Decimal("100")).quantize(AMOUNT_QUANTUM, rounding=ROUND_UP)

    @staticmethod
    def preview(booking_number, total_price):
        percentage = ShareCalculator.calculate_share(booking_number)
        return {
            "booking_number": booking_number,
            "base_percentage": BASE_PERCENTAGE,
            "actual_percentage": percentage,
            "amount": ShareCalculator.share_amount(total_price, percentage),
        }
