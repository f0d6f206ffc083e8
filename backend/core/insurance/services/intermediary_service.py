from __future__ import annotations

from common.persistence import Store
from insurance.models import Intermediary
from insurance.transforms import prepare_intermediary_fields
from ledger.events import publish_event
from ledger.models import LedgerEntry
from ledger.services import snapshot


class IntermediaryService:
    def __init__(self, *, store: Store):
        self.store = store

    def create(self, *, actor, data: dict, request=None) -> Intermediary:
        fields = prepare_intermediary_fields(data)

        def _create():
            intermediary = self.store.create(Intermediary, actor=actor, **fields)
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_CREATE,
                event_type="insurance.intermediary.create",
                instance=intermediary,
                request=request,
            )
            return intermediary

        return self.store.transaction(_create)

    def update(self, *, actor, intermediary: Intermediary, data: dict, request=None) -> Intermediary:
        fields = prepare_intermediary_fields(data)
        before = snapshot(intermediary)

        def _update():
            updated = self.store.update(intermediary, actor=actor, **fields)
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_UPDATE,
                event_type="insurance.intermediary.update",
                instance=updated,
                request=request,
                data_before=before,
            )
            return updated

        return self.store.transaction(_update)
