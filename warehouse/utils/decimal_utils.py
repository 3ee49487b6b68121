# warehouse/utils/decimal_utils.py
from decimal import Decimal, ROUND_HALF_UP

WEIGHT_PLACES = Decimal("0.001")


def to_decimal(value) -> Decimal:
    """Decimal from int/float/str/None. None and empty strings count as zero."""
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_weight(value) -> Decimal:
    return to_decimal(value).quantize(WEIGHT_PLACES, rounding=ROUND_HALF_UP)
