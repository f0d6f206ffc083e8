from __future__ import annotations

import hashlib
import json
import logging
from uuid import UUID, uuid4

from django.core.serializers.json import DjangoJSONEncoder
from django.db import IntegrityError, transaction
from django.forms.models import model_to_dict
from django.utils import timezone

from common.context import get_current_request_id
from ledger.models import LedgerEntry

logger = logging.getLogger(__name__)

_CHAIN_RETRIES = 5


def _canonical_json(value) -> str:
    return json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=True,
        default=str,
    )


def _safe_uuid(value) -> UUID | None:
    if not value:
        return None
    try:
        return UUID(str(value))
    except ValueError:
        return None


def _extract_ip(request) -> str:
    if request is None:
        return ""
    forwarded_for = (request.META.get("HTTP_X_FORWARDED_FOR") or "").strip()
    if forwarded_for:
        return forwarded_for.split(",", 1)[0].strip()
    return (request.META.get("REMOTE_ADDR") or "").strip()


def _jsonable(value):
    # Stored JSON must hash the same way after a database round trip.
    if value is None:
        return None
    return json.loads(json.dumps(value, cls=DjangoJSONEncoder))


def _build_entry_hash(payload: dict, prev_hash: str) -> str:
    material = f"{prev_hash}{_canonical_json(payload)}".encode("utf-8")
    return hashlib.sha256(material).hexdigest()


def _hash_payload(entry: LedgerEntry) -> dict:
    return {
        "chain_id": entry.chain_id,
        "actor_username": entry.actor_username,
        "actor_role": entry.actor_role,
        "action": entry.action,
        "event_type": entry.event_type,
        "resource_label": entry.resource_label,
        "resource_pk": entry.resource_pk,
        "occurred_at": entry.occurred_at.isoformat(),
        "request_id": str(entry.request_id) if entry.request_id else "",
        "request_method": entry.request_method,
        "request_path": entry.request_path,
        "data_before": entry.data_before,
        "data_after": entry.data_after,
        "metadata": entry.metadata,
    }


def snapshot(instance, *, exclude=("created_at", "updated_at")) -> dict:
    """JSON-ready dict of an instance's concrete fields."""

    fields = [field.name for field in instance._meta.fields if field.name not in exclude]
    payload = model_to_dict(instance, fields=fields)
    payload["id"] = instance.pk
    return json.loads(_canonical_json(payload))


def append_ledger_entry(
    *,
    actor,
    action: str,
    resource_label: str,
    resource_pk: str,
    request=None,
    event_type: str = "",
    data_before: dict | None = None,
    data_after: dict | None = None,
    metadata: dict | None = None,
) -> LedgerEntry:
    """Append a new immutable ledger entry.

    Retries when a concurrent writer extends the same chain first.
    """

    chain_id = resource_label.split(".", 1)[0] or "system"
    occurred_at = timezone.now()

    request_id = _safe_uuid(get_current_request_id())
    request_method = ""
    request_path = ""
    ip_address = ""
    if request is not None:
        request_id = request_id or _safe_uuid(getattr(request, "request_id", None))
        request_method = (getattr(request, "method", "") or "").upper()
        request_path = getattr(request, "path", "") or ""
        ip_address = _extract_ip(request)
    if request_id is None:
        request_id = uuid4()

    actor_obj = actor if getattr(actor, "is_authenticated", False) else None
    actor_username = (getattr(actor_obj, "username", "") or "").strip()
    actor_role = (getattr(actor_obj, "role", "") or "").strip()

    if not event_type:
        event_type = f"{resource_label}.{action.lower()}"

    for _attempt in range(_CHAIN_RETRIES):
        prev_hash = (
            LedgerEntry.objects.filter(chain_id=chain_id)
            .order_by("-id")
            .values_list("entry_hash", flat=True)
            .first()
            or ""
        )

        entry = LedgerEntry(
            actor=actor_obj,
            actor_username=actor_username,
            actor_role=actor_role,
            action=action,
            event_type=event_type,
            resource_label=resource_label,
            resource_pk=str(resource_pk),
            occurred_at=occurred_at,
            request_id=request_id,
            request_method=request_method,
            request_path=request_path,
            ip_address=ip_address or None,
            chain_id=chain_id,
            prev_hash=prev_hash,
            data_before=_jsonable(data_before),
            data_after=_jsonable(data_after),
            metadata=_jsonable(metadata) if isinstance(metadata, dict) else {},
        )
        entry.entry_hash = _build_entry_hash(_hash_payload(entry), prev_hash)

        try:
            with transaction.atomic():
                entry.save(force_insert=True)
            return entry
        except IntegrityError as exc:
            if "prev_hash" in str(exc) or "uq_ledger_prev_hash_per_chain" in str(exc):
                logger.info("Ledger chain %s moved while appending; retrying.", chain_id)
                continue
            raise

    raise RuntimeError("Failed to append ledger entry (concurrency retries exhausted).")


def verify_chain(chain_id: str) -> LedgerEntry | None:
    """Return the first entry whose hash does not match, or None if intact."""

    prev_hash = ""
    for entry in LedgerEntry.objects.filter(chain_id=chain_id).order_by("id").iterator():
        expected = _build_entry_hash(_hash_payload(entry), prev_hash)
        if entry.prev_hash != prev_hash or entry.entry_hash != expected:
            logger.warning("Ledger chain %s broken at entry %s.", chain_id, entry.pk)
            return entry
        prev_hash = entry.entry_hash
    return None
