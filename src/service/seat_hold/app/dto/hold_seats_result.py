from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class HoldSeatsResult(BaseModel):
    """Backend acknowledgement of a hold: {holdId, seats, expiresAt, ttlSeconds}"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='ignore')

    hold_id: str
    seats: List[str]
    expires_at: datetime
    ttl_seconds: Optional[int] = None
