# warehouse/constants/fees.py

from decimal import Decimal

# Movement requests are billed per started block of weight.
FEE_BLOCK_KG = Decimal("10")
FEE_PER_BLOCK = 150
MIN_BILLABLE_WEIGHT_KG = Decimal("1")
