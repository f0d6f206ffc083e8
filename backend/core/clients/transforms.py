"""Pure input normalisation applied before a client is persisted."""

import re

from django.conf import settings

_PHONE_STRIP_RE = re.compile(r"[^\d+]")


def normalize_email(value: str | None) -> str:
    return (value or "").strip().lower()


def normalize_phone(value: str | None) -> str:
    return _PHONE_STRIP_RE.sub("", value or "")


def normalize_client_fields(data: dict) -> dict:
    """Return a copy of ``data`` with contact fields normalised.

    Only keys present in ``data`` are touched so partial updates stay partial.
    """

    normalized = dict(data)
    if "email" in normalized:
        normalized["email"] = normalize_email(normalized["email"])
    for key in ("phone", "alternate_phone"):
        if key in normalized:
            normalized[key] = normalize_phone(normalized[key])
    for key in ("first_name", "middle_name", "last_name", "id_number"):
        if key in normalized and isinstance(normalized[key], str):
            normalized[key] = normalized[key].strip()
    if "country" in normalized and not normalized["country"]:
        normalized["country"] = getattr(settings, "DEFAULT_CLIENT_COUNTRY", "Kenya")
    return normalized
