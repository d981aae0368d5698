"""
Booking backend response envelope handling.

Success: {"success": true, "data": {...}, "message": "..."}
Failure: {"success": false, "error": {"code": "...", "message": "...", "details": {...}}}
"""

from typing import Any

import httpx
import orjson

from src.platform.exception.exceptions import ApiError, CustomBaseError, HoldConflictError


NETWORK_ERROR = 'NETWORK_ERROR'
TIMEOUT = 'TIMEOUT'
UNKNOWN_ERROR = 'UNKNOWN_ERROR'

SEAT_CONFLICT_CODES = frozenset({'SEATS_UNAVAILABLE', 'SEATS_ALREADY_HELD', 'INSUFFICIENT_SEATS'})

_STATUS_FALLBACK_CODES = {
    401: 'UNAUTHORIZED',
    403: 'FORBIDDEN',
    404: 'NOT_FOUND',
    408: TIMEOUT,
    409: 'CONFLICT',
}

USER_ERROR_MESSAGES = {
    NETWORK_ERROR: 'Không thể kết nối đến máy chủ. Vui lòng kiểm tra kết nối internet.',
    TIMEOUT: 'Yêu cầu mất quá nhiều thời gian. Vui lòng thử lại.',
    'UNAUTHORIZED': 'Phiên đăng nhập đã hết hạn. Vui lòng đăng nhập lại.',
    'FORBIDDEN': 'Bạn không có quyền thực hiện hành động này.',
    'NOT_FOUND': 'Không tìm thấy dữ liệu yêu cầu.',
    'SEAT_CONFLICT': 'Ghế đã được đặt bởi người khác. Vui lòng chọn ghế khác.',
    'BOOKING_EXPIRED': 'Thời gian giữ ghế đã hết. Vui lòng chọn lại ghế.',
}
SERVER_ERROR_MESSAGE = 'Lỗi máy chủ. Vui lòng thử lại sau.'
FALLBACK_ERROR_MESSAGE = 'Đã xảy ra lỗi. Vui lòng thử lại.'


def _json_body(response: httpx.Response) -> Any:
    try:
        return orjson.loads(response.content)
    except orjson.JSONDecodeError:
        return None


def error_from_response(
    response: httpx.Response, *, conflict_on_409: bool = False
) -> ApiError | HoldConflictError:
    """
    Map an error envelope to the exception taxonomy

    Seat-conflict codes always map to HoldConflictError. A bare 409 only does
    when conflict_on_409 is set (hold requests), elsewhere it stays an ApiError.
    """
    body = _json_body(response)
    error_data = body.get('error') if isinstance(body, dict) else None
    if not isinstance(error_data, dict):
        error_data = {}

    code = error_data.get('code') or _STATUS_FALLBACK_CODES.get(response.status_code, UNKNOWN_ERROR)
    message = error_data.get('message') or response.reason_phrase or 'Request failed'
    details = error_data.get('details') if isinstance(error_data.get('details'), dict) else {}

    if code in SEAT_CONFLICT_CODES or (conflict_on_409 and response.status_code == 409):
        return HoldConflictError(
            message,
            unavailable_seats=details.get('unavailableSeats') or details.get('seats') or (),
        )
    return ApiError(message, status_code=response.status_code, code=code, details=details)


def error_from_transport(exc: httpx.TransportError) -> ApiError:
    if isinstance(exc, httpx.TimeoutException):
        return ApiError(USER_ERROR_MESSAGES[TIMEOUT], status_code=408, code=TIMEOUT)
    return ApiError(USER_ERROR_MESSAGES[NETWORK_ERROR], status_code=0, code=NETWORK_ERROR)


def unwrap_data(response: httpx.Response, *, conflict_on_409: bool = False) -> Any:
    """
    Return the envelope's data member for a 2xx response

    Raises:
        ApiError / HoldConflictError: For non-2xx responses or envelopes flagged unsuccessful
    """
    if response.is_error:
        raise error_from_response(response, conflict_on_409=conflict_on_409)

    body = _json_body(response)
    if not isinstance(body, dict):
        raise ApiError(
            'Malformed response from booking backend',
            status_code=response.status_code,
            code=UNKNOWN_ERROR,
        )
    if body.get('success') is False:
        raise error_from_response(response, conflict_on_409=conflict_on_409)
    return body.get('data')


def user_error_message(error: Exception) -> str:
    """Vietnamese message suitable for an inline error region"""
    code = getattr(error, 'code', None)
    if code in USER_ERROR_MESSAGES:
        if code == 'SEAT_CONFLICT' and isinstance(error, CustomBaseError) and error.message:
            return error.message
        return USER_ERROR_MESSAGES[code]
    if isinstance(error, CustomBaseError):
        if 500 <= error.status_code < 600:
            return SERVER_ERROR_MESSAGE
        return error.message or FALLBACK_ERROR_MESSAGE
    return FALLBACK_ERROR_MESSAGE
