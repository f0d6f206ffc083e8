import logging
import uuid

from django.conf import settings

from common.context import reset_current_request_id, set_current_request_id

logger = logging.getLogger(__name__)


class RequestContextMiddleware:
    """Resolve a correlation id per request and echo it on the response."""

    def __init__(self, get_response):
        self.get_response = get_response
        self.header_name = getattr(settings, "REQUEST_ID_HEADER", "X-Request-ID")

    def __call__(self, request):
        request.request_id = self._resolve_request_id(request)
        token = set_current_request_id(request.request_id)
        try:
            response = self.get_response(request)
            response[self.header_name] = request.request_id
            return response
        finally:
            reset_current_request_id(token)

    def _resolve_request_id(self, request) -> str:
        raw_value = (request.headers.get(self.header_name) or "").strip()
        if raw_value:
            try:
                return str(uuid.UUID(raw_value))
            except ValueError:
                logger.debug("Ignoring malformed %s header.", self.header_name)
        return str(uuid.uuid4())
