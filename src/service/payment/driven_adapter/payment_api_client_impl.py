from typing import Any, Optional, Self

import httpx
import orjson
from pydantic import ValidationError

from src.platform.config.core_setting import Settings
from src.platform.exception.exceptions import InvalidPaymentResponseError, PaymentInitiationError
from src.platform.logging.loguru_io import Logger
from src.service.payment.app.dto.initiate_payment_result import InitiatePaymentResult
from src.service.payment.app.interface.i_payment_api_client import IPaymentApiClient
from src.service.payment.domain.enum.payment_method import PaymentMethod


PAYMENT_INITIATE_PATH = '/payment/initiate'


class PaymentApiClientImpl(IPaymentApiClient):
    def __init__(self, *, http_client: httpx.AsyncClient) -> None:
        self._http = http_client

    @classmethod
    def from_settings(
        cls, settings: Settings, *, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> Self:
        return cls(
            http_client=httpx.AsyncClient(
                base_url=settings.PAYMENT_API_BASE_URL,
                timeout=settings.API_TIMEOUT_SECONDS,
                headers=settings.API_HEADERS,
                transport=transport,
            )
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @Logger.io
    async def initiate_payment(
        self,
        *,
        booking_id: str,
        method: PaymentMethod,
        amount: int,
        return_url: str,
    ) -> InitiatePaymentResult:
        try:
            response = await self._http.post(
                PAYMENT_INITIATE_PATH,
                json={
                    'bookingId': booking_id,
                    'paymentMethod': str(method),
                    'amount': amount,
                    'returnUrl': return_url,
                },
            )
        except httpx.TransportError as e:
            raise PaymentInitiationError(f'Payment initiation failed: {e}') from e

        if response.is_error:
            raise PaymentInitiationError(
                f'Payment initiation failed: {response.reason_phrase}',
                status_code=response.status_code,
            )

        try:
            return InitiatePaymentResult.model_validate(orjson.loads(response.content))
        except (orjson.JSONDecodeError, ValidationError) as e:
            raise InvalidPaymentResponseError(f'Invalid payment response: {e}') from e
