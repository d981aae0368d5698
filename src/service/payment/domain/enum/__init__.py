"""Payment Domain Enums"""

from src.service.payment.domain.enum.payment_method import PaymentMethod
from src.service.payment.domain.enum.payment_result_status import PaymentResultStatus
from src.service.payment.domain.enum.payment_selection_status import PaymentSelectionStatus

__all__ = ['PaymentMethod', 'PaymentResultStatus', 'PaymentSelectionStatus']
