from decimal import Decimal

from insurance.calculations import HUNDRED, quantize_money, to_decimal


def calculate_commission(premium, rate) -> Decimal:
    """Commission owed on ``premium`` at ``rate`` percent, rounded to cents."""

    return quantize_money(to_decimal(premium) * to_decimal(rate) / HUNDRED)
