from pydantic import BaseModel
from typing import List, Dict, Any


class RestoreResult(BaseModel):
    restored: List[str]
    skipped: List[str]
    errors: Dict[str, str]


class StateValue(BaseModel):
    key: str
    value: Any = None


class MerchantPaymentSummary(BaseModel):
    merchant_id: str
    request_count: int
    inbound_fees: int
    outbound_fees: int
    total_fees: int


class PaymentSummaryData(BaseModel):
    total_fees: int
    merchants: List[MerchantPaymentSummary]
