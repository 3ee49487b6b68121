# warehouse/constants/inventory_movement_type.py

from enum import Enum


class AdjustmentReason(str, Enum):
    ADJUSTMENT = "adjustment"
    DAMAGE = "damage"
    LOSS = "loss"
    SALE = "sale"
    PURCHASE = "purchase"
    RETURN = "return"
    CORRECTION = "correction"
    FOUND = "found"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class TransactionType(str, Enum):
    """Audit log entry types: every adjustment reason, request stock movements and request fees."""

    ADJUSTMENT = "adjustment"
    DAMAGE = "damage"
    LOSS = "loss"
    SALE = "sale"
    PURCHASE = "purchase"
    RETURN = "return"
    CORRECTION = "correction"
    FOUND = "found"
    OUTBOUND = "outbound"
    INBOUND = "inbound"
    INBOUND_FEE = "inbound_fee"
    OUTBOUND_FEE = "outbound_fee"


class SignPolicy(str, Enum):
    DEDUCT = "deduct"
    ADD = "add"
    AS_ENTERED = "as_entered"


REASON_SIGN_POLICY = {
    AdjustmentReason.DAMAGE: SignPolicy.DEDUCT,
    AdjustmentReason.LOSS: SignPolicy.DEDUCT,
    AdjustmentReason.SALE: SignPolicy.DEDUCT,
    AdjustmentReason.PURCHASE: SignPolicy.ADD,
    AdjustmentReason.RETURN: SignPolicy.ADD,
    AdjustmentReason.CORRECTION: SignPolicy.ADD,
    AdjustmentReason.FOUND: SignPolicy.ADD,
    AdjustmentReason.ADJUSTMENT: SignPolicy.AS_ENTERED,
}

_unmapped = set(AdjustmentReason) - set(REASON_SIGN_POLICY)
if _unmapped:
    raise RuntimeError(
        f"Adjustment reasons without a sign policy: {sorted(r.value for r in _unmapped)}"
    )
