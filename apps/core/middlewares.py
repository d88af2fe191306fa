import json

from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin
from rest_framework.response import Response


class ApiResponseWrapperMiddleware(MiddlewareMixin):
    """
    Middleware to wrap API responses in a consistent format.

    Every JSON response becomes ``{"success", "message", "data", "error"}``. A
    top-level ``message`` key in the payload is lifted into the envelope; for
    errors the first error detail is used as the message.
    """

    def process_response(self, request, response):
        if request.path in ("/docs/", "/schema/"):
            return response

        # Only wrap DRF responses or JSON responses
        if isinstance(response, Response):
            status = response.status_code
            data = response.data if response.data else None
        elif isinstance(response, JsonResponse):
            status = response.status_code
            data = json.loads(response.content)
        else:
            # Do not wrap non-JSON responses
            return response

        is_error = getattr(response, "exception", False) or status >= 400
        message = None
        if isinstance(data, dict):
            data = dict(data)
            message = data.pop("message", None)
            if message is None and is_error:
                message = self._first_error_detail(data)
            data = data or None

        envelope = {
            "success": not is_error,
            "message": message,
            "data": None if is_error else data,
            "error": data if is_error else None,
        }
        # Return a new JsonResponse with the wrapped data
        return JsonResponse(envelope, status=status)

    @staticmethod
    def _first_error_detail(data: dict):
        errors = data.get("errors")
        if isinstance(errors, list) and errors and isinstance(errors[0], dict):
            return errors[0].get("detail")
        return data.get("detail")
