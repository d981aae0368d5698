from typing import Optional

import attrs


@attrs.define(frozen=True)
class RouteSummary:
    id: str
    price: int
    bus_type: str


@attrs.define(frozen=True)
class BookingDraft:
    """
    Booking state owned by the booking flow (route, seats, price).

    Read-only input to payment; its lifecycle is managed elsewhere.
    """

    current_route: Optional[RouteSummary]
    selected_seats: tuple[str, ...] = attrs.field(converter=tuple, factory=tuple)
    total_price: int = 0
