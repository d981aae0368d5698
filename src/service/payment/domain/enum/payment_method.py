from enum import StrEnum


class PaymentMethod(StrEnum):
    VNPAY = 'VNPAY'
    MOMO = 'MOMO'
    ZALOPAY = 'ZALOPAY'
    CREDIT_CARD = 'CREDIT_CARD'
