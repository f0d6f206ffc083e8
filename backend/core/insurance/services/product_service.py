from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from django.utils import timezone

from common.errors import InvalidStateError
from common.persistence import Store
from insurance.models import Product
from insurance.transforms import prepare_product_fields
from ledger.events import publish_event
from ledger.models import LedgerEntry
from ledger.services import snapshot

logger = logging.getLogger(__name__)

_ACTIVATABLE = frozenset(
    (Product.Status.DRAFT, Product.Status.PENDING_APPROVAL, Product.Status.INACTIVE)
)


class ProductService:
    def __init__(self, *, store: Store, clock: Callable[[], datetime] = timezone.now):
        self.store = store
        self.clock = clock

    def create(self, *, actor, data: dict, request=None) -> Product:
        fields = prepare_product_fields(data)

        def _create():
            product = self.store.create(Product, actor=actor, **fields)
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_CREATE,
                event_type="insurance.product.create",
                instance=product,
                request=request,
            )
            return product

        return self.store.transaction(_create)

    def update(self, *, actor, product: Product, data: dict, request=None) -> Product:
        fields = prepare_product_fields(data)
        fields.pop("status", None)
        before = snapshot(product)

        def _update():
            updated = self.store.update(product, actor=actor, **fields)
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_UPDATE,
                event_type="insurance.product.update",
                instance=updated,
                request=request,
                data_before=before,
            )
            return updated

        return self.store.transaction(_update)

    def activate(self, *, actor, product: Product, request=None) -> Product:
        if product.status not in _ACTIVATABLE:
            raise InvalidStateError.for_action(
                entity="product", current_status=product.status, action="activate"
            )
        before = snapshot(product)

        def _activate():
            updated = self.store.update(
                product,
                actor=actor,
                status=Product.Status.ACTIVE,
                approved_at=self.clock(),
                approved_by=actor if getattr(actor, "is_authenticated", False) else None,
            )
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_TRANSITION,
                event_type="insurance.product.activate",
                instance=updated,
                request=request,
                data_before=before,
            )
            return updated

        product = self.store.transaction(_activate)
        logger.info("Product %s activated", product.code)
        return product

    def deactivate(self, *, actor, product: Product, request=None) -> Product:
        if product.status != Product.Status.ACTIVE:
            raise InvalidStateError.for_action(
                entity="product", current_status=product.status, action="deactivate"
            )
        before = snapshot(product)

        def _deactivate():
            updated = self.store.update(product, actor=actor, status=Product.Status.INACTIVE)
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_TRANSITION,
                event_type="insurance.product.deactivate",
                instance=updated,
                request=request,
                data_before=before,
            )
            return updated

        return self.store.transaction(_deactivate)
