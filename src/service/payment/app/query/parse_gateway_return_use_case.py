"""
Gateway return handoff.

Each provider reports the outcome in its own query parameters when it sends
the user back; they are normalized into a PaymentResult here.
"""

from typing import Mapping, Optional

from src.platform.logging.loguru_io import Logger
from src.service.payment.domain.entity.payment_result import PaymentResult
from src.service.payment.domain.enum.payment_result_status import PaymentResultStatus


# (query parameter, value meaning success) per provider
GATEWAY_SUCCESS_CODES: tuple[tuple[str, str], ...] = (
    ('vnp_TransactionStatus', '00'),  # VNPAY
    ('resultCode', '0'),  # MoMo
    ('status', '1'),  # ZaloPay
)


def _param(params: Mapping[str, str], *names: str) -> Optional[str]:
    for name in names:
        if value := params.get(name):
            return value
    return None


@Logger.io
def normalize_gateway_return(params: Mapping[str, str]) -> PaymentResult:
    status = PaymentResultStatus.FAILED
    for name, success_value in GATEWAY_SUCCESS_CODES:
        if params.get(name) == success_value:
            status = PaymentResultStatus.SUCCESS
            break

    return PaymentResult(
        status=status,
        transaction_id=_param(params, 'transactionId', 'vnp_TxnRef'),
        booking_id=_param(params, 'bookingId'),
        message=_param(params, 'message'),
    )
