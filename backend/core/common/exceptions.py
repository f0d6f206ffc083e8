import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from common.errors import ConstraintError, DomainError

logger = logging.getLogger(__name__)


def validation_error_payload(exc: DjangoValidationError) -> dict:
    if hasattr(exc, "error_dict"):
        errors = exc.message_dict
        first_field = next(iter(errors), "")
        detail = errors[first_field][0] if first_field and errors[first_field] else "Invalid input."
        return {"detail": detail, "code": "invalid", "errors": errors}
    messages = exc.messages
    return {"detail": messages[0] if messages else "Invalid input.", "code": "invalid", "errors": {}}


def api_exception_handler(exc, context):
    """Translate domain and model errors into API responses."""

    if isinstance(exc, IntegrityError):
        exc = ConstraintError.from_integrity_error(exc)

    if isinstance(exc, DjangoValidationError):
        return Response(validation_error_payload(exc), status=status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, DomainError):
        view = context.get("view")
        logger.info(
            "Domain error in %s: %s",
            view.__class__.__name__ if view is not None else "-",
            exc.message,
        )
        return Response(exc.as_payload(), status=exc.status_code)

    return exception_handler(exc, context)
