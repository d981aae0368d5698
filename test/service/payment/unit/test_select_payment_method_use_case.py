from datetime import date, timedelta
from unittest.mock import AsyncMock, Mock

import pytest

from src.platform.exception.exceptions import (
    DomainError,
    InvalidPaymentResponseError,
    PaymentInitiationError,
)
from src.service.payment.app.command.select_payment_method_use_case import (
    SelectPaymentMethodUseCase,
    generate_booking_id,
)
from src.service.payment.app.dto.initiate_payment_result import InitiatePaymentResult
from src.service.payment.app.interface.i_payment_api_client import IPaymentApiClient
from src.service.payment.domain.entity.booking_draft import BookingDraft, RouteSummary
from src.service.payment.domain.enum.payment_method import PaymentMethod
from src.service.payment.domain.enum.payment_selection_status import PaymentSelectionStatus
from src.service.seat_hold.app.dto.hold_seats_result import HoldSeatsResult
from src.service.seat_hold.app.interface.i_hold_api_client import IHoldApiClient
from src.service.seat_hold.app.seat_hold_controller import SeatHoldContext, SeatHoldController
from src.service.seat_hold.domain.entity.hold_entity import HoldRequest
from src.service.seat_hold.driven_adapter.hold_store_impl import HoldStoreImpl
from src.service.seat_hold.driven_adapter.key_value_store_impl import InMemoryKeyValueStore
from test.helpers import FakeClock


RETURN_URL = 'http://localhost:3000/payment/result'


@pytest.fixture
def payment_api_client() -> AsyncMock:
    return AsyncMock(spec=IPaymentApiClient)


@pytest.fixture
def hold_guard() -> Mock:
    guard = Mock()
    guard.check_expiry.return_value = False
    guard.has_active_hold = True
    return guard


@pytest.fixture
def use_case(payment_api_client: AsyncMock, hold_guard: Mock) -> SelectPaymentMethodUseCase:
    return SelectPaymentMethodUseCase(
        payment_api_client=payment_api_client, hold_guard=hold_guard, return_url=RETURN_URL
    )


@pytest.fixture
def draft() -> BookingDraft:
    return BookingDraft(
        current_route=RouteSummary(id='R1', price=250_000, bus_type='SLEEPER'),
        selected_seats=['A1', 'A2'],
        total_price=500_000,
    )


@pytest.mark.unit
class TestSelectPaymentMethodUseCase:
    @pytest.mark.asyncio
    async def test_redirects_to_gateway(
        self,
        use_case: SelectPaymentMethodUseCase,
        payment_api_client: AsyncMock,
        draft: BookingDraft,
    ) -> None:
        # Given
        payment_api_client.initiate_payment.return_value = InitiatePaymentResult(
            success=True, payment_url='https://pay.example/checkout', transaction_id='T1'
        )

        # When
        selection = await use_case.execute(
            booking_id='BK-1', method=PaymentMethod.VNPAY, draft=draft
        )

        # Then
        assert selection.status == PaymentSelectionStatus.REDIRECT
        assert selection.redirect_url == 'https://pay.example/checkout'
        assert selection.transaction_id == 'T1'
        payment_api_client.initiate_payment.assert_awaited_once_with(
            booking_id='BK-1',
            method=PaymentMethod.VNPAY,
            amount=500_000,
            return_url=RETURN_URL,
        )

    @pytest.mark.asyncio
    async def test_expired_hold_never_reaches_payment_backend(
        self,
        use_case: SelectPaymentMethodUseCase,
        payment_api_client: AsyncMock,
        hold_guard: Mock,
        draft: BookingDraft,
    ) -> None:
        hold_guard.check_expiry.return_value = True

        selection = await use_case.execute(
            booking_id='BK-1', method=PaymentMethod.MOMO, draft=draft
        )

        assert selection.status == PaymentSelectionStatus.EXPIRED
        assert selection.redirect_url is None
        payment_api_client.initiate_payment.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'response',
        [
            InitiatePaymentResult(success=True, payment_url=None),
            InitiatePaymentResult(success=True, payment_url=''),
        ],
    )
    async def test_missing_redirect_is_invalid(
        self,
        use_case: SelectPaymentMethodUseCase,
        payment_api_client: AsyncMock,
        draft: BookingDraft,
        response: InitiatePaymentResult,
    ) -> None:
        payment_api_client.initiate_payment.return_value = response

        with pytest.raises(InvalidPaymentResponseError):
            await use_case.execute(booking_id='BK-1', method=PaymentMethod.ZALOPAY, draft=draft)

    @pytest.mark.asyncio
    async def test_refusal_surfaces_backend_message(
        self,
        use_case: SelectPaymentMethodUseCase,
        payment_api_client: AsyncMock,
        draft: BookingDraft,
    ) -> None:
        payment_api_client.initiate_payment.return_value = InitiatePaymentResult(
            success=False,
            payment_url='https://pay.example/checkout',
            message='Số tiền không hợp lệ',
        )

        with pytest.raises(PaymentInitiationError, match='Số tiền không hợp lệ'):
            await use_case.execute(booking_id='BK-1', method=PaymentMethod.VNPAY, draft=draft)

    @pytest.mark.asyncio
    async def test_refusal_without_message_uses_default(
        self,
        use_case: SelectPaymentMethodUseCase,
        payment_api_client: AsyncMock,
        draft: BookingDraft,
    ) -> None:
        payment_api_client.initiate_payment.return_value = InitiatePaymentResult(success=False)

        with pytest.raises(PaymentInitiationError, match='refused'):
            await use_case.execute(booking_id='BK-1', method=PaymentMethod.MOMO, draft=draft)

    @pytest.mark.asyncio
    async def test_no_active_hold_never_reaches_payment_backend(
        self,
        use_case: SelectPaymentMethodUseCase,
        payment_api_client: AsyncMock,
        hold_guard: Mock,
        draft: BookingDraft,
    ) -> None:
        hold_guard.has_active_hold = False

        selection = await use_case.execute(
            booking_id='BK-1', method=PaymentMethod.VNPAY, draft=draft
        )

        assert selection.status == PaymentSelectionStatus.EXPIRED
        payment_api_client.initiate_payment.assert_not_called()

    @pytest.mark.asyncio
    async def test_backend_failure_propagates(
        self,
        use_case: SelectPaymentMethodUseCase,
        payment_api_client: AsyncMock,
        draft: BookingDraft,
    ) -> None:
        payment_api_client.initiate_payment.side_effect = PaymentInitiationError('down')

        with pytest.raises(PaymentInitiationError):
            await use_case.execute(
                booking_id='BK-1', method=PaymentMethod.CREDIT_CARD, draft=draft
            )

    @pytest.mark.asyncio
    async def test_zero_amount_is_rejected(
        self, use_case: SelectPaymentMethodUseCase, payment_api_client: AsyncMock
    ) -> None:
        with pytest.raises(DomainError):
            await use_case.execute(
                booking_id='BK-1',
                method=PaymentMethod.VNPAY,
                draft=BookingDraft(current_route=None),
            )

        payment_api_client.initiate_payment.assert_not_called()


@pytest.mark.unit
def test_generate_booking_id_format() -> None:
    booking_id = generate_booking_id()

    assert booking_id.startswith('BK-')
    assert booking_id[3:].isdigit()


@pytest.mark.unit
class TestSelectPaymentMethodWithSeatHold:
    """Gate backed by a real seat hold controller"""

    @pytest.fixture
    def hold_api_client(self, fake_clock: FakeClock) -> AsyncMock:
        client = AsyncMock(spec=IHoldApiClient)
        client.hold_seats.return_value = HoldSeatsResult(
            hold_id='H1', seats=['A1', 'A2'], expires_at=fake_clock() + timedelta(seconds=30)
        )
        return client

    @pytest.fixture
    def controller(self, hold_api_client: AsyncMock, fake_clock: FakeClock) -> SeatHoldController:
        return SeatHoldController(
            context=SeatHoldContext(
                api_client=hold_api_client,
                hold_store=HoldStoreImpl(kv_store=InMemoryKeyValueStore(), storage_key='hold'),
                clock=fake_clock,
            )
        )

    @pytest.fixture
    def gated_use_case(
        self, payment_api_client: AsyncMock, controller: SeatHoldController
    ) -> SelectPaymentMethodUseCase:
        payment_api_client.initiate_payment.return_value = InitiatePaymentResult(
            success=True, payment_url='https://pay.example/checkout', transaction_id='T1'
        )
        return SelectPaymentMethodUseCase(
            payment_api_client=payment_api_client, hold_guard=controller, return_url=RETURN_URL
        )

    async def _hold(self, controller: SeatHoldController) -> None:
        await controller.hold(
            HoldRequest(route_id='R1', departure_date=date(2026, 3, 20), seats=['A1', 'A2'])
        )

    @pytest.mark.asyncio
    async def test_active_hold_redirects(
        self,
        gated_use_case: SelectPaymentMethodUseCase,
        controller: SeatHoldController,
        payment_api_client: AsyncMock,
        draft: BookingDraft,
    ) -> None:
        await self._hold(controller)

        selection = await gated_use_case.execute(
            booking_id='BK-1', method=PaymentMethod.VNPAY, draft=draft
        )

        assert selection.status == PaymentSelectionStatus.REDIRECT
        payment_api_client.initiate_payment.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_expiry_that_clears_the_hold_still_blocks_payment(
        self,
        gated_use_case: SelectPaymentMethodUseCase,
        controller: SeatHoldController,
        payment_api_client: AsyncMock,
        fake_clock: FakeClock,
        draft: BookingDraft,
    ) -> None:
        # Given: expiry is wired to clear the hold, and the deadline has passed
        await self._hold(controller)
        controller.set_on_expire(controller.clear_hold)
        fake_clock.advance(31)

        # When
        selection = await gated_use_case.execute(
            booking_id='BK-1', method=PaymentMethod.VNPAY, draft=draft
        )

        # Then
        assert selection.status == PaymentSelectionStatus.EXPIRED
        assert controller.hold_id is None
        payment_api_client.initiate_payment.assert_not_called()

    @pytest.mark.asyncio
    async def test_cleared_hold_blocks_payment(
        self,
        gated_use_case: SelectPaymentMethodUseCase,
        controller: SeatHoldController,
        payment_api_client: AsyncMock,
        draft: BookingDraft,
    ) -> None:
        await self._hold(controller)
        controller.clear_hold()

        selection = await gated_use_case.execute(
            booking_id='BK-1', method=PaymentMethod.MOMO, draft=draft
        )

        assert selection.status == PaymentSelectionStatus.EXPIRED
        payment_api_client.initiate_payment.assert_not_called()

    @pytest.mark.asyncio
    async def test_never_held_blocks_payment(
        self,
        gated_use_case: SelectPaymentMethodUseCase,
        payment_api_client: AsyncMock,
        draft: BookingDraft,
    ) -> None:
        selection = await gated_use_case.execute(
            booking_id='BK-1', method=PaymentMethod.ZALOPAY, draft=draft
        )

        assert selection.status == PaymentSelectionStatus.EXPIRED
        payment_api_client.initiate_payment.assert_not_called()
