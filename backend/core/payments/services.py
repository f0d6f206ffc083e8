from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from django.utils import timezone

from common.errors import InvalidStateError, ValidationError
from common.persistence import Store
from insurance.calculations import quantize_money
from ledger.events import publish_event
from ledger.models import LedgerEntry
from ledger.services import snapshot
from payments.models import Payment

logger = logging.getLogger(__name__)

_CREATABLE_STATUSES = frozenset((Payment.Status.PENDING, Payment.Status.COMPLETED))


def normalize_payment_fields(data: dict) -> dict:
    fields = dict(data)
    if fields.get("amount") is not None:
        fields["amount"] = quantize_money(fields["amount"])
    if "transaction_id" in fields:
        fields["transaction_id"] = (fields["transaction_id"] or "").strip().upper() or None
    if "mpesa_code" in fields:
        fields["mpesa_code"] = (fields["mpesa_code"] or "").strip().upper()
    # Payments against a policy belong to its holder.
    policy = fields.get("policy")
    if policy is not None and not fields.get("client"):
        fields["client"] = policy.client
    return fields


class PaymentService:
    def __init__(self, *, store: Store, clock: Callable[[], datetime] = timezone.now):
        self.store = store
        self.clock = clock

    def create(self, *, actor, data: dict, request=None) -> Payment:
        fields = normalize_payment_fields(data)
        self._check_premium_payment(fields)
        if fields.get("status") == Payment.Status.COMPLETED and not fields.get("payment_date"):
            fields["payment_date"] = self.clock()

        def _create():
            payment = self.store.create(Payment, actor=actor, **fields)
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_CREATE,
                event_type="payments.payment.create",
                instance=payment,
                request=request,
            )
            return payment

        payment = self.store.transaction(_create)
        logger.info("Payment %s recorded for client %s", payment.pk, payment.client_id)
        return payment

    def update(self, *, actor, payment: Payment, data: dict, request=None) -> Payment:
        if payment.status != Payment.Status.PENDING:
            raise InvalidStateError.for_action(
                entity="payment", current_status=payment.status, action="update"
            )
        fields = normalize_payment_fields(data)
        fields.pop("status", None)
        self._check_premium_payment(fields)
        before = snapshot(payment)

        def _update():
            updated = self.store.update(payment, actor=actor, **fields)
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_UPDATE,
                event_type="payments.payment.update",
                instance=updated,
                request=request,
                data_before=before,
            )
            return updated

        return self.store.transaction(_update)

    @staticmethod
    def _check_premium_payment(fields: dict) -> None:
        """Claim payouts are recorded through ``ClaimService.record_payment`` only."""

        errors = {}
        if fields.get("claim") is not None:
            errors["claim"] = "Claim payouts must be recorded on the claim."
        if fields.get("payment_type") == Payment.Type.CLAIM_SETTLEMENT:
            errors["payment_type"] = "Claim settlements must be recorded on the claim."
        status = fields.get("status", Payment.Status.PENDING)
        if status not in _CREATABLE_STATUSES:
            errors["status"] = "New payments must be PENDING or COMPLETED."
        if errors:
            raise ValidationError(errors)

    def mark_as_completed(
        self, *, transaction_id: str, mpesa_code: str | None = None, actor=None, request=None
    ) -> bool:
        """Complete the PENDING payment carrying ``transaction_id``.

        Returns False when there is no such pending payment, so a repeated
        gateway callback is a no-op.
        """

        transaction_id = (transaction_id or "").strip().upper()
        if not transaction_id:
            return False
        payment = (
            self.store.find_all(
                Payment, {"transaction_id": transaction_id, "status": Payment.Status.PENDING}
            ).first()
        )
        if payment is None:
            logger.info("No pending payment for transaction %s", transaction_id)
            return False

        now = self.clock()
        changes = {
            "status": Payment.Status.COMPLETED,
            "payment_date": now,
            "validated_at": now,
        }
        if mpesa_code:
            changes["mpesa_code"] = mpesa_code.strip().upper()
        if actor is not None and getattr(actor, "is_authenticated", False):
            changes["validated_by"] = actor
        before = snapshot(payment)

        def _complete():
            updated = self.store.update(payment, actor=actor, **changes)
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_TRANSITION,
                event_type="payments.payment.complete",
                instance=updated,
                request=request,
                data_before=before,
                metadata={"transaction_id": transaction_id},
            )
            return updated

        self.store.transaction(_complete)
        logger.info("Payment %s completed via transaction %s", payment.pk, transaction_id)
        return True
