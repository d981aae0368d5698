from abc import ABC, abstractmethod

from src.service.payment.app.dto.initiate_payment_result import InitiatePaymentResult
from src.service.payment.domain.enum.payment_method import PaymentMethod


class IPaymentApiClient(ABC):
    @abstractmethod
    async def initiate_payment(
        self,
        *,
        booking_id: str,
        method: PaymentMethod,
        amount: int,
        return_url: str,
    ) -> InitiatePaymentResult:
        """
        Ask the payment backend for a gateway URL

        Raises:
            PaymentInitiationError: Transport failure or non-2xx answer
        """
        pass

    @abstractmethod
    async def aclose(self) -> None:
        pass
