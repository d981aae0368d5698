from typing import Optional

import attrs

from src.service.payment.domain.enum.payment_selection_status import PaymentSelectionStatus


@attrs.define(frozen=True)
class PaymentSelection:
    status: PaymentSelectionStatus
    redirect_url: Optional[str] = None
    transaction_id: Optional[str] = None

    @classmethod
    def expired(cls) -> 'PaymentSelection':
        return cls(status=PaymentSelectionStatus.EXPIRED)

    @classmethod
    def redirect(cls, *, url: str, transaction_id: Optional[str]) -> 'PaymentSelection':
        return cls(
            status=PaymentSelectionStatus.REDIRECT, redirect_url=url, transaction_id=transaction_id
        )
