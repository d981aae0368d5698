from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class InitiatePaymentResult(BaseModel):
    """Payment backend answer: {success, paymentUrl, transactionId, message}"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='ignore')

    success: bool = False
    payment_url: Optional[str] = None
    transaction_id: Optional[str] = None
    message: Optional[str] = None
