from __future__ import annotations

import logging
import re
from typing import Any

from common.context import get_current_request_id


_EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
_PHONE_RE = re.compile(r"(?<![\w])\+?\d[\d\s-]{8,13}\d(?!\d)")


def mask_pii(text: str) -> str:
    """Mask e-mail addresses and phone/ID-like digit runs in a string.

    Nothing of the original value is kept so logs can be shipped as-is.
    """

    if not text:
        return text

    text = _EMAIL_RE.sub("***EMAIL***", text)
    text = _PHONE_RE.sub("***PHONE***", text)
    return text


class MaskPIIFilter(logging.Filter):
    """Logging filter that masks client contact data in log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            message = record.getMessage()
        except (TypeError, ValueError):  # pragma: no cover
            message = str(getattr(record, "msg", ""))

        # Replace the formatted message and clear args to avoid double formatting.
        record.msg = mask_pii(str(message))
        record.args = ()

        for key in ("email", "phone", "id_number"):
            if hasattr(record, key):
                value: Any = getattr(record, key)
                if isinstance(value, str):
                    setattr(record, key, mask_pii(value))

        return True


class RequestIdFilter(logging.Filter):
    """Attach the current request correlation id to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "request_id", None):
            record.request_id = get_current_request_id() or "-"
        return True
