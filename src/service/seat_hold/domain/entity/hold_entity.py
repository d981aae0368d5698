from datetime import date, datetime, timezone
import math
from typing import Any, Optional, Sequence

import attrs

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger


def parse_timestamp(value: str | datetime) -> datetime:
    """ISO 8601 (with or without 'Z') -> tz-aware UTC datetime. Naive values are taken as UTC."""
    parsed = value if isinstance(value, datetime) else datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_date(value: str | date) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


@attrs.define(frozen=True)
class HoldRequest:
    route_id: str
    departure_date: date = attrs.field(converter=parse_date)
    seats: tuple[str, ...] = attrs.field(converter=tuple)
    ttl_seconds: Optional[int] = None

    @Logger.io
    def validate(self) -> None:
        if not self.route_id:
            raise DomainError('route_id is required')
        if not self.seats:
            raise DomainError('At least one seat must be selected')
        if len(set(self.seats)) != len(self.seats):
            raise DomainError('Duplicate seats in hold request')
        if self.ttl_seconds is not None and self.ttl_seconds <= 0:
            raise DomainError('ttl_seconds must be positive')


@attrs.define(frozen=True)
class Hold:
    """
    Time-limited, server-acknowledged reservation of specific seats.

    A hold is never partially updated: a new hold() replaces it wholesale and
    release/clear/expiry removes it.
    """

    hold_id: str
    expires_at: datetime = attrs.field(converter=parse_timestamp)
    seats: tuple[str, ...] = attrs.field(converter=tuple)
    route_id: str
    departure_date: date = attrs.field(converter=parse_date)

    @classmethod
    def create(
        cls,
        *,
        hold_id: str,
        expires_at: str | datetime,
        seats: Sequence[str],
        route_id: str,
        departure_date: str | date,
    ) -> 'Hold':
        if not hold_id:
            raise DomainError('Hold response is missing holdId')
        return cls(
            hold_id=hold_id,
            expires_at=expires_at,  # type: ignore[arg-type]
            seats=seats,  # type: ignore[arg-type]
            route_id=route_id,
            departure_date=departure_date,  # type: ignore[arg-type]
        )

    def is_active(self, now: datetime) -> bool:
        return self.expires_at > now

    def seconds_remaining(self, now: datetime) -> int:
        return max(0, math.floor((self.expires_at - now).total_seconds()))

    def to_record(self) -> dict[str, Any]:
        return {
            'holdId': self.hold_id,
            'expiresAt': self.expires_at.isoformat(),
            'seats': list(self.seats),
            'routeId': self.route_id,
            'departureDate': self.departure_date.isoformat(),
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> 'Hold':
        """
        Rebuild a hold from its persisted shape

        Raises:
            KeyError, TypeError, ValueError: When the record is malformed
        """
        seats = record['seats']
        if not isinstance(seats, list):
            raise TypeError('seats must be a list')
        return cls.create(
            hold_id=record['holdId'],
            expires_at=record['expiresAt'],
            seats=seats,
            route_id=record['routeId'],
            departure_date=record['departureDate'],
        )
