import attrs


@attrs.define(frozen=True)
class CountdownState:
    """Projection of a hold's expiry onto "now". Never a source of truth."""

    time_remaining_seconds: int
    is_expired: bool
    display: str
    is_urgent: bool
