from collections import OrderedDict

from warehouse.models.enums.inventory_request_type import RequestType
from warehouse.repositories.base import WarehouseStore
from warehouse.schemas.admin.admin_schemas import MerchantPaymentSummary, PaymentSummaryData


async def summarize_payments(store: WarehouseStore, merchant_id: str | None = None) -> PaymentSummaryData:
    """Request fees grouped per merchant, in order of first appearance."""
    groups: "OrderedDict[str, MerchantPaymentSummary]" = OrderedDict()

    for request in await store.requests.list(merchant_id=merchant_id):
        summary = groups.get(request.merchant_id)
        if summary is None:
            summary = groups[request.merchant_id] = MerchantPaymentSummary(
                merchant_id=request.merchant_id,
                request_count=0,
                inbound_fees=0,
                outbound_fees=0,
                total_fees=0,
            )
        summary.request_count += 1
        if request.type == RequestType.inbound:
            summary.inbound_fees += request.fee
        else:
            summary.outbound_fees += request.fee
        summary.total_fees += request.fee

    merchants = list(groups.values())
    return PaymentSummaryData(
        total_fees=sum(m.total_fees for m in merchants),
        merchants=merchants,
    )
