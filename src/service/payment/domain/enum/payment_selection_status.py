from enum import StrEnum


class PaymentSelectionStatus(StrEnum):
    REDIRECT = 'redirect'  # hand off to the gateway URL
    EXPIRED = 'expired'  # hold ran out, show the expired-hold modal
