from typing import Optional

import attrs

from src.service.payment.domain.enum.payment_result_status import PaymentResultStatus


@attrs.define(frozen=True)
class PaymentResult:
    """Gateway outcome, normalized across providers"""

    status: PaymentResultStatus
    transaction_id: Optional[str] = None
    booking_id: Optional[str] = None
    message: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status == PaymentResultStatus.SUCCESS
