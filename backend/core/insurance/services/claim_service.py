"""Claim lifecycle.

Every transition is checked against ``_ALLOWED_TRANSITIONS`` before anything
is written, so a refused action leaves the claim untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable

from django.utils import timezone

from common.errors import InvalidStateError, ValidationError
from common.persistence import Store
from insurance.calculations import ZERO, quantize_money, to_decimal
from insurance.models import Claim, Policy
from insurance.transforms import prepare_claim_fields
from ledger.events import publish_event
from ledger.models import LedgerEntry
from ledger.services import snapshot
from notifications import NotificationEvent, notify
from notifications.events import CLAIM_PAYMENT_RECORDED
from payments.models import Payment

logger = logging.getLogger(__name__)

_ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    Claim.Status.DRAFT: frozenset((Claim.Status.SUBMITTED,)),
    Claim.Status.SUBMITTED: frozenset(
        (Claim.Status.UNDER_REVIEW, Claim.Status.APPROVED, Claim.Status.REJECTED)
    ),
    Claim.Status.UNDER_REVIEW: frozenset((Claim.Status.APPROVED, Claim.Status.REJECTED)),
    Claim.Status.APPROVED: frozenset((Claim.Status.PAID,)),
    Claim.Status.REJECTED: frozenset((Claim.Status.CLOSED,)),
    Claim.Status.PAID: frozenset((Claim.Status.CLOSED,)),
    Claim.Status.CLOSED: frozenset(),
}

_PAYABLE_STATUSES = frozenset((Claim.Status.APPROVED, Claim.Status.PAID))


@dataclass(frozen=True)
class RecordedClaimPayment:
    claim: Claim
    payment: Payment


class ClaimService:
    def __init__(
        self,
        *,
        store: Store,
        notifier: Callable[[NotificationEvent], list] = notify,
        clock: Callable[[], datetime] = timezone.now,
    ):
        self.store = store
        self.notifier = notifier
        self.clock = clock

    def create(self, *, actor, data: dict, request=None) -> Claim:
        fields = prepare_claim_fields(data, now=self.clock())
        policy = fields.get("policy")
        if isinstance(policy, Policy) and not fields.get("client"):
            fields["client"] = policy.client
        fields["status"] = Claim.Status.DRAFT

        def _create():
            claim = self.store.create(Claim, actor=actor, **fields)
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_CREATE,
                event_type="insurance.claim.create",
                instance=claim,
                request=request,
            )
            return claim

        claim = self.store.transaction(_create)
        logger.info("Claim %s filed against policy %s", claim.claim_number, claim.policy_id)
        return claim

    def update(self, *, actor, claim: Claim, data: dict, request=None) -> Claim:
        if claim.status != Claim.Status.DRAFT:
            raise InvalidStateError.for_action(
                entity="claim", current_status=claim.status, action="update"
            )
        fields = {
            key: value
            for key, value in data.items()
            if key not in ("status", "claim_number", "paid_amount", "approved_amount")
        }
        for key in ("estimated_amount",):
            if fields.get(key) is not None:
                fields[key] = quantize_money(fields[key])
        before = snapshot(claim)

        def _update():
            updated = self.store.update(claim, actor=actor, **fields)
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_UPDATE,
                event_type="insurance.claim.update",
                instance=updated,
                request=request,
                data_before=before,
            )
            return updated

        return self.store.transaction(_update)

    def submit(self, *, actor, claim: Claim, request=None) -> Claim:
        return self._transition(
            actor=actor, claim=claim, to_status=Claim.Status.SUBMITTED, action="submit", request=request
        )

    def review(self, *, actor, claim: Claim, reviewer=None, request=None) -> Claim:
        reviewer = reviewer or actor
        changes = {"assigned_to": reviewer}
        if claim.date_assigned is None:
            changes["date_assigned"] = self.clock()
        return self._transition(
            actor=actor,
            claim=claim,
            to_status=Claim.Status.UNDER_REVIEW,
            action="review",
            request=request,
            changes=changes,
        )

    def assign(self, *, actor, claim: Claim, assignee, request=None) -> Claim:
        if claim.status in (Claim.Status.CLOSED, Claim.Status.REJECTED, Claim.Status.PAID):
            raise InvalidStateError.for_action(
                entity="claim", current_status=claim.status, action="assign"
            )
        before = snapshot(claim)

        def _assign():
            updated = self.store.update(
                claim, actor=actor, assigned_to=assignee, date_assigned=self.clock()
            )
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_UPDATE,
                event_type="insurance.claim.assign",
                instance=updated,
                request=request,
                data_before=before,
                metadata={"assignee_id": getattr(assignee, "pk", None)},
            )
            return updated

        return self.store.transaction(_assign)

    def approve(self, *, actor, claim: Claim, amount=None, request=None) -> Claim:
        self._ensure_allowed(claim, Claim.Status.APPROVED, "approve")
        approved = quantize_money(amount) if amount not in (None, "") else ZERO
        if not approved:
            # Zero or missing falls back to the claimant's estimate.
            approved = quantize_money(claim.estimated_amount or ZERO)
        if approved <= ZERO:
            raise ValidationError({"approved_amount": "Approved amount must be greater than zero."})
        changes = {"approved_amount": approved, "assigned_to": actor}
        if claim.date_assigned is None:
            changes["date_assigned"] = self.clock()
        return self._transition(
            actor=actor,
            claim=claim,
            to_status=Claim.Status.APPROVED,
            action="approve",
            request=request,
            changes=changes,
        )

    def reject(self, *, actor, claim: Claim, reason: str, request=None) -> Claim:
        self._ensure_allowed(claim, Claim.Status.REJECTED, "reject")
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError({"reason": "A rejection reason is required."})
        return self._transition(
            actor=actor,
            claim=claim,
            to_status=Claim.Status.REJECTED,
            action="reject",
            request=request,
            changes={"rejection_reason": reason},
        )

    def record_payment(
        self,
        *,
        actor,
        claim: Claim,
        amount,
        payment_method: str = Payment.Method.BANK_TRANSFER,
        transaction_id: str | None = None,
        notes: str = "",
        request=None,
    ) -> RecordedClaimPayment:
        """Pay out on an approved claim.

        Not atomic: the payment row is written first and the claim second, so
        a failure on the claim update leaves the payment in place.
        """

        if claim.status not in _PAYABLE_STATUSES:
            raise InvalidStateError.for_action(
                entity="claim", current_status=claim.status, action="record payment"
            )
        amount = quantize_money(amount)
        if amount <= ZERO:
            raise ValidationError({"amount": "Payment amount must be greater than zero."})

        now = self.clock()
        payment = self.store.create(
            Payment,
            actor=actor,
            client=claim.client,
            claim=claim,
            amount=amount,
            payment_method=payment_method,
            payment_type=Payment.Type.CLAIM_SETTLEMENT,
            status=Payment.Status.COMPLETED,
            transaction_id=transaction_id or None,
            payment_date=now,
            validated_by=actor if getattr(actor, "is_authenticated", False) else None,
            validated_at=now,
            notes=notes,
        )

        before = snapshot(claim)
        from_status = claim.status
        paid_amount = quantize_money(to_decimal(claim.paid_amount) + amount)
        changes = {"paid_amount": paid_amount}
        if claim.approved_amount is not None and paid_amount >= claim.approved_amount:
            changes["status"] = Claim.Status.PAID
        claim = self.store.update(claim, actor=actor, **changes)

        publish_event(
            actor=actor,
            action=LedgerEntry.ACTION_TRANSITION,
            event_type="insurance.claim.record_payment",
            instance=claim,
            request=request,
            data_before=before,
            metadata={
                "payment_id": payment.pk,
                "amount": str(amount),
                "from_status": from_status,
                "to_status": claim.status,
            },
        )
        logger.info(
            "Recorded payment %s of %s on claim %s (now %s)",
            payment.pk,
            amount,
            claim.claim_number,
            claim.status,
        )
        self.notifier(self._payment_event(claim, amount))
        return RecordedClaimPayment(claim=claim, payment=payment)

    def close(self, *, actor, claim: Claim, request=None) -> Claim:
        return self._transition(
            actor=actor,
            claim=claim,
            to_status=Claim.Status.CLOSED,
            action="close",
            request=request,
            changes={"date_completed": self.clock()},
        )

    def change_status(self, *, actor, claim: Claim, status: str, request=None, **options) -> Claim:
        """Dispatch a generic status change to the matching lifecycle action."""

        status = str(status or "").strip().upper()
        if status == Claim.Status.SUBMITTED:
            return self.submit(actor=actor, claim=claim, request=request)
        if status == Claim.Status.UNDER_REVIEW:
            return self.review(actor=actor, claim=claim, request=request)
        if status == Claim.Status.APPROVED:
            return self.approve(
                actor=actor, claim=claim, amount=options.get("amount"), request=request
            )
        if status == Claim.Status.REJECTED:
            return self.reject(
                actor=actor, claim=claim, reason=options.get("reason", ""), request=request
            )
        if status == Claim.Status.CLOSED:
            return self.close(actor=actor, claim=claim, request=request)
        if status in Claim.Status.values:
            # PAID only happens through record_payment; DRAFT is never re-entered.
            raise InvalidStateError.for_action(
                entity="claim", current_status=claim.status, action=f"move to {status}"
            )
        raise ValidationError({"status": f"Unknown claim status '{status}'."})

    def _payment_event(self, claim: Claim, amount: Decimal) -> NotificationEvent:
        client = claim.client
        return NotificationEvent(
            kind=CLAIM_PAYMENT_RECORDED,
            recipient_name=client.full_name,
            email=client.email,
            phone=client.phone,
            context={
                "claim_number": claim.claim_number,
                "amount": amount,
                "paid_amount": claim.paid_amount,
                "approved_amount": claim.approved_amount,
                "status": claim.status,
            },
        )

    def _ensure_allowed(self, claim: Claim, to_status: str, action: str) -> None:
        if to_status not in _ALLOWED_TRANSITIONS.get(claim.status, frozenset()):
            raise InvalidStateError.for_action(
                entity="claim", current_status=claim.status, action=action
            )

    def _transition(
        self,
        *,
        actor,
        claim: Claim,
        to_status: str,
        action: str,
        request=None,
        changes: dict | None = None,
    ) -> Claim:
        self._ensure_allowed(claim, to_status, action)
        from_status = claim.status
        before = snapshot(claim)

        def _apply():
            updated = self.store.update(claim, actor=actor, status=to_status, **(changes or {}))
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_TRANSITION,
                event_type=f"insurance.claim.{action}",
                instance=updated,
                request=request,
                data_before=before,
                metadata={"from_status": from_status, "to_status": to_status},
            )
            return updated

        return self.store.transaction(_apply)
