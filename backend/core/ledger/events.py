from __future__ import annotations

from ledger.models import LedgerEntry
from ledger.services import append_ledger_entry, snapshot


def publish_event(
    *,
    actor,
    action: str,
    event_type: str,
    instance,
    request=None,
    data_before: dict | None = None,
    metadata: dict | None = None,
    deleted: bool = False,
) -> LedgerEntry:
    """Record a domain event for ``instance`` in the audit ledger."""

    return append_ledger_entry(
        actor=actor,
        action=action,
        event_type=event_type,
        resource_label=instance._meta.label,
        resource_pk=str(instance.pk),
        request=request,
        data_before=data_before,
        data_after=None if deleted else snapshot(instance),
        metadata=metadata,
    )
