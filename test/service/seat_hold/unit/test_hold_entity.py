from datetime import date, datetime, timedelta, timezone

import pytest

from src.platform.exception.exceptions import DomainError
from src.service.seat_hold.domain.entity.hold_entity import Hold, HoldRequest


NOW = datetime(2026, 3, 14, 8, 0, 0, tzinfo=timezone.utc)


def _hold(expires_at: datetime = NOW + timedelta(seconds=300)) -> Hold:
    return Hold.create(
        hold_id='H1',
        expires_at=expires_at,
        seats=['A1', 'A2'],
        route_id='R1',
        departure_date='2026-03-20',
    )


@pytest.mark.unit
class TestHoldRequest:
    def test_converts_seats_and_date(self) -> None:
        request = HoldRequest(route_id='R1', departure_date='2026-03-20', seats=['A1', 'A2'])

        assert request.seats == ('A1', 'A2')
        assert request.departure_date == date(2026, 3, 20)

    def test_validate_rejects_empty_seats(self) -> None:
        request = HoldRequest(route_id='R1', departure_date='2026-03-20', seats=[])

        with pytest.raises(DomainError, match='At least one seat'):
            request.validate()

    def test_validate_rejects_duplicate_seats(self) -> None:
        request = HoldRequest(route_id='R1', departure_date='2026-03-20', seats=['A1', 'A1'])

        with pytest.raises(DomainError, match='Duplicate'):
            request.validate()

    def test_validate_rejects_non_positive_ttl(self) -> None:
        request = HoldRequest(
            route_id='R1', departure_date='2026-03-20', seats=['A1'], ttl_seconds=0
        )

        with pytest.raises(DomainError):
            request.validate()


@pytest.mark.unit
class TestHold:
    def test_is_active_is_strict(self) -> None:
        hold = _hold(expires_at=NOW)

        assert hold.is_active(NOW - timedelta(microseconds=1))
        assert not hold.is_active(NOW)

    def test_seconds_remaining_floors_and_clamps(self) -> None:
        hold = _hold(expires_at=NOW + timedelta(seconds=125, milliseconds=900))

        assert hold.seconds_remaining(NOW) == 125
        assert hold.seconds_remaining(NOW + timedelta(seconds=500)) == 0

    def test_parses_zulu_timestamp_as_utc(self) -> None:
        hold = Hold.create(
            hold_id='H1',
            expires_at='2026-03-14T08:05:00.000Z',
            seats=['A1'],
            route_id='R1',
            departure_date='2026-03-20',
        )

        assert hold.expires_at == NOW + timedelta(minutes=5)

    def test_naive_timestamp_is_taken_as_utc(self) -> None:
        hold = _hold(expires_at=datetime(2026, 3, 14, 8, 5, 0))

        assert hold.expires_at.tzinfo is not None
        assert hold.expires_at == NOW + timedelta(minutes=5)

    def test_record_shape(self) -> None:
        record = _hold().to_record()

        assert record == {
            'holdId': 'H1',
            'expiresAt': '2026-03-14T08:05:00+00:00',
            'seats': ['A1', 'A2'],
            'routeId': 'R1',
            'departureDate': '2026-03-20',
        }

    def test_from_record_rebuilds_the_same_hold(self) -> None:
        hold = _hold()

        assert Hold.from_record(hold.to_record()) == hold

    def test_from_record_rejects_missing_fields(self) -> None:
        with pytest.raises(KeyError):
            Hold.from_record({'holdId': 'H1'})

    def test_create_requires_hold_id(self) -> None:
        with pytest.raises(DomainError):
            Hold.create(
                hold_id='',
                expires_at=NOW,
                seats=['A1'],
                route_id='R1',
                departure_date='2026-03-20',
            )
