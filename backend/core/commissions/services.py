from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable

from django.utils import timezone

from commissions.models import Commission
from commissions.transforms import prepare_commission_fields
from common.errors import InvalidStateError, ValidationError
from common.persistence import Store
from ledger.events import publish_event
from ledger.models import LedgerEntry
from ledger.services import snapshot

logger = logging.getLogger(__name__)

_ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    Commission.Status.PENDING: frozenset(
        (Commission.Status.APPROVED, Commission.Status.DISPUTED, Commission.Status.CANCELLED)
    ),
    Commission.Status.DISPUTED: frozenset((Commission.Status.APPROVED, Commission.Status.CANCELLED)),
    Commission.Status.APPROVED: frozenset(
        (
            Commission.Status.PROCESSING,
            Commission.Status.PAID,
            Commission.Status.DISPUTED,
            Commission.Status.CANCELLED,
        )
    ),
    Commission.Status.PROCESSING: frozenset((Commission.Status.PAID, Commission.Status.CANCELLED)),
    Commission.Status.PAID: frozenset(),
    Commission.Status.CANCELLED: frozenset(),
}


class CommissionService:
    def __init__(self, *, store: Store, clock: Callable[[], datetime] = timezone.now):
        self.store = store
        self.clock = clock

    def create(self, *, actor, data: dict, request=None) -> Commission:
        fields = prepare_commission_fields(data, today=timezone.localdate(self.clock()))
        policy = fields.get("policy")
        if policy is not None:
            fields.setdefault("product", policy.product)
            if fields.get("intermediary") is None and policy.intermediary_id:
                fields["intermediary"] = policy.intermediary
        fields["status"] = Commission.Status.PENDING

        def _create():
            commission = self.store.create(Commission, actor=actor, **fields)
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_CREATE,
                event_type="commissions.commission.create",
                instance=commission,
                request=request,
            )
            return commission

        commission = self.store.transaction(_create)
        logger.info(
            "Commission %s of %s created for intermediary %s",
            commission.pk,
            commission.amount,
            commission.intermediary_id,
        )
        return commission

    def update(self, *, actor, commission: Commission, data: dict, request=None) -> Commission:
        if commission.status != Commission.Status.PENDING:
            raise InvalidStateError.for_action(
                entity="commission", current_status=commission.status, action="update"
            )
        merged = {"amount": commission.amount, "due_date": commission.due_date, "period": commission.period}
        merged.update(data)
        fields = prepare_commission_fields(merged, today=timezone.localdate(self.clock()))
        fields.pop("status", None)
        before = snapshot(commission)

        def _update():
            updated = self.store.update(commission, actor=actor, **fields)
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_UPDATE,
                event_type="commissions.commission.update",
                instance=updated,
                request=request,
                data_before=before,
            )
            return updated

        return self.store.transaction(_update)

    def approve(self, *, actor, commission: Commission, request=None) -> Commission:
        return self._transition(
            actor=actor,
            commission=commission,
            to_status=Commission.Status.APPROVED,
            action="approve",
            request=request,
            changes={"processed_by": self._user(actor)},
        )

    def mark_as_paid(
        self,
        *,
        actor,
        commission: Commission,
        payment_reference: str,
        payment_date: datetime | None = None,
        request=None,
    ) -> Commission:
        self._ensure_allowed(commission, Commission.Status.PAID, "mark as paid")
        payment_reference = (payment_reference or "").strip()
        if not payment_reference:
            raise ValidationError({"payment_reference": "A payment reference is required."})
        return self._transition(
            actor=actor,
            commission=commission,
            to_status=Commission.Status.PAID,
            action="mark_paid",
            request=request,
            changes={
                "payment_reference": payment_reference,
                "paid_date": payment_date or self.clock(),
                "processed_by": self._user(actor),
            },
        )

    def dispute(self, *, actor, commission: Commission, notes: str = "", request=None) -> Commission:
        changes = {}
        if notes:
            changes["notes"] = "\n".join(filter(None, (commission.notes, notes.strip())))
        return self._transition(
            actor=actor,
            commission=commission,
            to_status=Commission.Status.DISPUTED,
            action="dispute",
            request=request,
            changes=changes,
        )

    def cancel(self, *, actor, commission: Commission, request=None) -> Commission:
        return self._transition(
            actor=actor,
            commission=commission,
            to_status=Commission.Status.CANCELLED,
            action="cancel",
            request=request,
        )

    def process_batch(
        self,
        *,
        actor,
        commission_ids: Iterable[int],
        payment_reference: str,
        payment_date: datetime | None = None,
        request=None,
    ) -> list[Commission]:
        """Pay several approved commissions under one payment reference.

        All or nothing: one commission in the wrong state rolls back the batch.
        """

        ids = sorted(set(commission_ids))
        if not ids:
            raise ValidationError({"commission_ids": "Select at least one commission."})

        def _process():
            commissions = list(self.store.find_all(Commission, {"pk__in": ids}, order_by=("id",)))
            missing = set(ids) - {commission.pk for commission in commissions}
            if missing:
                raise ValidationError(
                    {"commission_ids": f"Unknown commission id(s): {sorted(missing)}."}
                )
            return [
                self.mark_as_paid(
                    actor=actor,
                    commission=commission,
                    payment_reference=payment_reference,
                    payment_date=payment_date,
                    request=request,
                )
                for commission in commissions
            ]

        paid = self.store.transaction(_process)
        logger.info("Paid %s commission(s) under reference %s", len(paid), payment_reference)
        return paid

    @staticmethod
    def _user(actor):
        return actor if getattr(actor, "is_authenticated", False) else None

    def _ensure_allowed(self, commission: Commission, to_status: str, action: str) -> None:
        if to_status not in _ALLOWED_TRANSITIONS.get(commission.status, frozenset()):
            raise InvalidStateError.for_action(
                entity="commission", current_status=commission.status, action=action
            )

    def _transition(
        self,
        *,
        actor,
        commission: Commission,
        to_status: str,
        action: str,
        request=None,
        changes: dict | None = None,
    ) -> Commission:
        self._ensure_allowed(commission, to_status, action)
        from_status = commission.status
        before = snapshot(commission)

        def _apply():
            updated = self.store.update(
                commission, actor=actor, status=to_status, **(changes or {})
            )
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_TRANSITION,
                event_type=f"commissions.commission.{action}",
                instance=updated,
                request=request,
                data_before=before,
                metadata={"from_status": from_status, "to_status": to_status},
            )
            return updated

        return self.store.transaction(_apply)
