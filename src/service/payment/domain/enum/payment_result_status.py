from enum import StrEnum


class PaymentResultStatus(StrEnum):
    SUCCESS = 'success'
    FAILED = 'failed'
    PENDING = 'pending'
