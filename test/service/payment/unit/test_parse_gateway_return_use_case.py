import pytest

from src.service.payment.app.query.parse_gateway_return_use_case import normalize_gateway_return
from src.service.payment.domain.enum.payment_result_status import PaymentResultStatus


@pytest.mark.unit
class TestNormalizeGatewayReturn:
    def test_vnpay_success(self) -> None:
        result = normalize_gateway_return(
            {'vnp_TransactionStatus': '00', 'vnp_TxnRef': 'T1', 'bookingId': 'BK-1'}
        )

        assert result.status == PaymentResultStatus.SUCCESS
        assert result.is_success
        assert result.transaction_id == 'T1'
        assert result.booking_id == 'BK-1'

    def test_vnpay_failure_code(self) -> None:
        result = normalize_gateway_return({'vnp_TransactionStatus': '02'})

        assert result.status == PaymentResultStatus.FAILED

    def test_momo_success(self) -> None:
        result = normalize_gateway_return({'resultCode': '0', 'transactionId': 'M1'})

        assert result.status == PaymentResultStatus.SUCCESS
        assert result.transaction_id == 'M1'

    def test_momo_failure(self) -> None:
        result = normalize_gateway_return({'resultCode': '1006', 'message': 'Cancelled'})

        assert result.status == PaymentResultStatus.FAILED
        assert result.message == 'Cancelled'

    def test_zalopay_success(self) -> None:
        assert normalize_gateway_return({'status': '1'}).is_success

    def test_missing_params_is_failed(self) -> None:
        result = normalize_gateway_return({})

        assert result.status == PaymentResultStatus.FAILED
        assert result.transaction_id is None
        assert result.booking_id is None
        assert result.message is None

    def test_transaction_id_preferred_over_vnpay_ref(self) -> None:
        result = normalize_gateway_return({'transactionId': 'T-main', 'vnp_TxnRef': 'T-vnp'})

        assert result.transaction_id == 'T-main'

    def test_empty_values_become_none(self) -> None:
        result = normalize_gateway_return({'bookingId': '', 'message': ''})

        assert result.booking_id is None
        assert result.message is None
