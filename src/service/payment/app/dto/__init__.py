"""Application layer DTOs"""

from src.service.payment.app.dto.initiate_payment_result import InitiatePaymentResult
from src.service.payment.app.dto.payment_selection import PaymentSelection

__all__ = ['InitiatePaymentResult', 'PaymentSelection']
