from typing import Protocol


class IHoldExpiryGuard(Protocol):
    """Anything that can tell whether the seat hold backing a checkout is still usable"""

    def check_expiry(self) -> bool: ...

    @property
    def has_active_hold(self) -> bool: ...
