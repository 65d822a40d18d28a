from __future__ import annotations

from enum import Enum

from starlette.status import HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND, HTTP_500_INTERNAL_SERVER_ERROR, \
    HTTP_502_BAD_GATEWAY, HTTP_504_GATEWAY_TIMEOUT


class AppExceptionCode(Enum):
    """Defines custom App Exception codes for this service, associated with HTTP Status codes."""
    BAD_REQUEST_ERROR = (HTTP_400_BAD_REQUEST, "Bad Request", "E_001")
    NOT_FOUND_ERROR = (HTTP_404_NOT_FOUND, "Not Found", "E_002")
    INTERNAL_SERVER_ERROR = (HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error", "E_003")
    DOWNSTREAM_HTTP_ERROR = (HTTP_502_BAD_GATEWAY, "Bad Gateway", "E_010")
    DOWNSTREAM_TIMEOUT_ERROR = (HTTP_504_GATEWAY_TIMEOUT, "Gateway Timeout", "E_011")
    BLOW_UP_ERROR = (HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error", "E_012")

    def __init__(self, response_code:int, message:str, error_code:str):
        self._response_code = response_code
        self._message = message
        self._error_code = error_code

    @property
    def response_code(self):
        return self._response_code

    @property
    def message(self):
        return self._message

    @property
    def error_code(self):
        return self._error_code

    def __str__(self):
        return f"response_code={self.response_code}, message={self.message}, error_code={self.error_code}"



class AppException(Exception):
    """Base exception for application"""
    def __init__(self, detail_message:str, app_exception_code:AppExceptionCode = AppExceptionCode.INTERNAL_SERVER_ERROR):
        self._detail_message = detail_message
        self._app_exception_code = app_exception_code
        super().__init__(detail_message)

    @property
    def detail_message(self):
        return self._detail_message

    @property
    def app_exception_code(self):
        return self._app_exception_code

    @property
    def response_code(self):
        return self._app_exception_code.response_code

    @property
    def message(self):
        return self._app_exception_code.message

    @property
    def error_code(self):
        return self._app_exception_code.error_code

    def __str__(self):
        return f"response_code={self.response_code}, message={self.message}, detail_message={self.detail_message}, error_code={self.error_code}"



class DownstreamHTTPException(AppException):
    """Raised when a downstream response is classified as an error but carries no raisable status"""
    def __init__(self, detail_message:str, status_code:int | None = None):
        self._status_code = status_code
        super().__init__(detail_message, AppExceptionCode.DOWNSTREAM_HTTP_ERROR)

    @property
    def status_code(self):
        return self._status_code

    def __str__(self):
        return super().__str__()

class BlowUpException(AppException):
    """Raised by the /blowup endpoint, always"""
    def __init__(self, detail_message:str):
        super().__init__(detail_message, AppExceptionCode.BLOW_UP_ERROR)

    def __str__(self):
        return super().__str__()
