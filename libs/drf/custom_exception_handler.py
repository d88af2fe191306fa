import logging

import sentry_sdk
from drf_standardized_errors.handler import exception_handler as drf_exception_handler
from rest_framework import status
from rest_framework.exceptions import APIException

from apps.devices.exceptions import (
    ConfigurationError,
    DeviceBusyError,
    DeviceError,
    DeviceRejected,
    NotConnectedError,
    TransportError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)

DEVICE_ERROR_STATUS = {
    ConfigurationError: status.HTTP_400_BAD_REQUEST,
    NotConnectedError: status.HTTP_409_CONFLICT,
    DeviceBusyError: status.HTTP_409_CONFLICT,
    UserNotFoundError: status.HTTP_404_NOT_FOUND,
    DeviceRejected: status.HTTP_422_UNPROCESSABLE_ENTITY,
    TransportError: status.HTTP_502_BAD_GATEWAY,
}


class DeviceAPIException(APIException):
    """DRF representation of a device session failure."""

    def __init__(self, error: DeviceError):
        self.status_code = DEVICE_ERROR_STATUS.get(type(error), status.HTTP_500_INTERNAL_SERVER_ERROR)
        super().__init__(detail=str(error), code=error.code)


def exception_handler(exc, context):
    if isinstance(exc, DeviceError):
        logger.warning(f"Device operation failed: {str(exc)}")
        exc = DeviceAPIException(exc)

    # call drf_standardized_errors
    response = drf_exception_handler(exc, context)

    # If response is None --> raise the exception to let Sentry capture it
    if response is None:
        sentry_sdk.capture_exception(exc)
        raise exc

    # Device link failures are expected operational errors, not bugs
    if response.status_code >= 500 and not isinstance(exc, DeviceAPIException):
        sentry_sdk.capture_exception(exc)

    return response
