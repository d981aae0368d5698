from datetime import date
from typing import Any, Optional, Self, Sequence

import httpx
from pydantic import ValidationError
import uuid_utils

from src.platform.config.core_setting import Settings
from src.platform.exception.exceptions import ApiError, ReleaseIgnorableError
from src.platform.http.api_response import UNKNOWN_ERROR, error_from_transport, unwrap_data
from src.platform.logging.loguru_io import Logger
from src.service.seat_hold.app.dto.hold_seats_result import HoldSeatsResult
from src.service.seat_hold.app.dto.seat_availability_dto import SeatAvailability
from src.service.seat_hold.app.interface.i_hold_api_client import IHoldApiClient
from src.service.seat_hold.domain.entity.hold_entity import HoldRequest


SEATS_AVAILABILITY_PATH = '/seats/availability'
SEATS_HOLD_PATH = '/seats/hold'
SEATS_RELEASE_PATH = '/seats/release'

# Release answers meaning "nothing left to release"
RELEASE_IGNORABLE_STATUS = frozenset({404, 410})
RELEASE_IGNORABLE_CODES = frozenset({'BOOKING_EXPIRED', 'NOT_FOUND', 'HOLD_NOT_FOUND'})


class HoldApiClientImpl(IHoldApiClient):
    """
    httpx client for the booking backend's seat endpoints.

    Usage:
        async with HoldApiClientImpl.from_settings(settings) as client:
            result = await client.hold_seats(request=request)
    """

    def __init__(self, *, http_client: httpx.AsyncClient) -> None:
        self._http = http_client

    @classmethod
    def from_settings(
        cls, settings: Settings, *, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> Self:
        return cls(
            http_client=httpx.AsyncClient(
                base_url=settings.API_BASE_URL,
                timeout=settings.API_TIMEOUT_SECONDS,
                headers=settings.API_HEADERS,
                transport=transport,
            )
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._http.request(method, path, **kwargs)
        except httpx.TransportError as e:
            raise error_from_transport(e) from e

    @Logger.io
    async def hold_seats(self, *, request: HoldRequest) -> HoldSeatsResult:
        payload: dict[str, Any] = {
            'routeId': request.route_id,
            'departureDate': request.departure_date.isoformat(),
            'seats': list(request.seats),
        }
        if request.ttl_seconds is not None:
            payload['ttlSeconds'] = request.ttl_seconds

        response = await self._send(
            'POST',
            SEATS_HOLD_PATH,
            json=payload,
            headers={'Idempotency-Key': str(uuid_utils.uuid7())},
        )
        data = unwrap_data(response, conflict_on_409=True)
        try:
            return HoldSeatsResult.model_validate(data)
        except ValidationError as e:
            raise ApiError(
                f'Malformed hold response: {e.error_count()} invalid field(s)',
                status_code=response.status_code,
                code=UNKNOWN_ERROR,
            ) from e

    @Logger.io
    async def release_seats(
        self,
        *,
        hold_id: str,
        route_id: str,
        departure_date: date,
        seats: Sequence[str],
    ) -> None:
        response = await self._send(
            'POST',
            SEATS_RELEASE_PATH,
            json={
                'holdId': hold_id,
                'routeId': route_id,
                'departureDate': departure_date.isoformat(),
                'seats': list(seats),
            },
        )
        if response.status_code in RELEASE_IGNORABLE_STATUS:
            raise ReleaseIgnorableError(
                f'Hold {hold_id} already gone (HTTP {response.status_code})', hold_id=hold_id
            )
        try:
            unwrap_data(response)
        except ApiError as e:
            if e.code in RELEASE_IGNORABLE_CODES:
                raise ReleaseIgnorableError(
                    f'Hold {hold_id} already gone ({e.code})', hold_id=hold_id
                ) from e
            raise

    @Logger.io
    async def get_seat_availability(
        self, *, route_id: str, departure_date: date
    ) -> SeatAvailability:
        response = await self._send(
            'GET',
            SEATS_AVAILABILITY_PATH,
            params={'routeId': route_id, 'departureDate': departure_date.isoformat()},
        )
        data = unwrap_data(response)
        try:
            return SeatAvailability.model_validate(data)
        except ValidationError as e:
            raise ApiError(
                f'Malformed availability response: {e.error_count()} invalid field(s)',
                status_code=response.status_code,
                code=UNKNOWN_ERROR,
            ) from e
