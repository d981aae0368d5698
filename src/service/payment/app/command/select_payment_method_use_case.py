import time

from opentelemetry import trace

from src.platform.exception.exceptions import (
    DomainError,
    InvalidPaymentResponseError,
    PaymentInitiationError,
)
from src.platform.logging.loguru_io import Logger
from src.service.payment.app.dto.payment_selection import PaymentSelection
from src.service.payment.app.interface.i_hold_expiry_guard import IHoldExpiryGuard
from src.service.payment.app.interface.i_payment_api_client import IPaymentApiClient
from src.service.payment.domain.entity.booking_draft import BookingDraft
from src.service.payment.domain.enum.payment_method import PaymentMethod


def generate_booking_id() -> str:
    return f'BK-{time.time_ns() // 1_000_000}'


class SelectPaymentMethodUseCase:
    """
    Payment method selected at checkout - gate on hold validity, then hand off to the gateway

    Flow:
    1. Hold expired, cleared or never made -> return EXPIRED (caller shows the
       expired-hold modal), the payment API is never called
    2. Initiate payment with {booking_id, method, amount}
    3. Backend refused -> PaymentInitiationError with its message;
       accepted without a redirect target -> InvalidPaymentResponseError (user retries)
    4. Return REDIRECT with the gateway URL; this is a one-way handoff and
       nothing is tracked until the gateway sends the user back

    Dependencies:
    - payment_api_client: Payment backend
    - hold_guard: Seat hold controller (check_expiry() and has_active_hold)
    """

    def __init__(
        self,
        *,
        payment_api_client: IPaymentApiClient,
        hold_guard: IHoldExpiryGuard,
        return_url: str,
    ) -> None:
        self.payment_api_client = payment_api_client
        self.hold_guard = hold_guard
        self.return_url = return_url
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def execute(
        self, *, booking_id: str, method: PaymentMethod, draft: BookingDraft
    ) -> PaymentSelection:
        """
        Raises:
            DomainError: Draft has nothing to pay for
            PaymentInitiationError: Payment backend unreachable or refused the request
            InvalidPaymentResponseError: Accepted response without a redirect URL
        """
        if self.hold_guard.check_expiry():
            Logger.base.warning(
                f'⌛ [PAYMENT] Hold expired before {method} could start for {booking_id}'
            )
            return PaymentSelection.expired()
        if not self.hold_guard.has_active_hold:
            Logger.base.warning(
                f'⌛ [PAYMENT] No active hold behind {booking_id}, not starting {method}'
            )
            return PaymentSelection.expired()

        if draft.total_price <= 0:
            raise DomainError('Booking has no amount to pay')

        with self.tracer.start_as_current_span(
            'use_case.select_payment_method',
            attributes={
                'booking.id': booking_id,
                'payment.method': str(method),
                'payment.amount': draft.total_price,
            },
        ):
            response = await self.payment_api_client.initiate_payment(
                booking_id=booking_id,
                method=method,
                amount=draft.total_price,
                return_url=self.return_url,
            )

        if not response.success:
            raise PaymentInitiationError(response.message or 'Payment initiation was refused')
        if not response.payment_url:
            raise InvalidPaymentResponseError()

        Logger.base.info(
            f'💳 [PAYMENT] Redirecting {booking_id} to {method} '
            f'(transaction {response.transaction_id})'
        )
        return PaymentSelection.redirect(
            url=response.payment_url, transaction_id=response.transaction_id
        )
