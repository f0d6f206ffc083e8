from __future__ import annotations

import logging

from clients.models import Client
from clients.transforms import normalize_client_fields
from common.persistence import Store
from ledger.events import publish_event
from ledger.models import LedgerEntry
from ledger.services import snapshot

logger = logging.getLogger(__name__)


class ClientService:
    def __init__(self, *, store: Store):
        self.store = store

    def create(self, *, actor, data: dict, request=None) -> Client:
        fields = normalize_client_fields(data)

        def _create():
            client = self.store.create(Client, actor=actor, **fields)
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_CREATE,
                event_type="clients.client.create",
                instance=client,
                request=request,
            )
            return client

        client = self.store.transaction(_create)
        logger.info("Client %s created", client.pk)
        return client

    def update(self, *, actor, client: Client, data: dict, request=None) -> Client:
        fields = normalize_client_fields(data)
        before = snapshot(client)

        def _update():
            updated = self.store.update(client, actor=actor, **fields)
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_UPDATE,
                event_type="clients.client.update",
                instance=updated,
                request=request,
                data_before=before,
            )
            return updated

        return self.store.transaction(_update)

    def delete(self, *, actor, client: Client, request=None) -> None:
        before = snapshot(client)

        def _delete():
            client.soft_delete(actor=actor)
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_DELETE,
                event_type="clients.client.delete",
                instance=client,
                request=request,
                data_before=before,
                deleted=True,
            )

        self.store.transaction(_delete)
