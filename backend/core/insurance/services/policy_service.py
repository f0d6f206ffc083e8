from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from django.db.models import Q
from django.utils import timezone

from common.errors import InvalidStateError, ValidationError
from common.persistence import Store
from insurance.calculations import installment_schedule
from insurance.models import Policy
from insurance.selectors.policy_selector import expired_policies
from insurance.transforms import prepare_policy_fields
from ledger.events import publish_event
from ledger.models import LedgerEntry
from ledger.services import snapshot

logger = logging.getLogger(__name__)

_ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    Policy.Status.ACTIVE: frozenset(
        (
            Policy.Status.LAPSED,
            Policy.Status.SUSPENDED,
            Policy.Status.CANCELLED,
            Policy.Status.EXPIRED,
        )
    ),
    Policy.Status.SUSPENDED: frozenset((Policy.Status.ACTIVE, Policy.Status.CANCELLED)),
    Policy.Status.LAPSED: frozenset((Policy.Status.ACTIVE, Policy.Status.CANCELLED)),
    Policy.Status.CANCELLED: frozenset(),
    Policy.Status.EXPIRED: frozenset(),
}


def allowed_transitions(status: str) -> frozenset[str]:
    return _ALLOWED_TRANSITIONS.get(status, frozenset())


class PolicyService:
    def __init__(self, *, store: Store):
        self.store = store

    def create(self, *, actor, data: dict, request=None) -> Policy:
        fields = prepare_policy_fields(data)

        def _create():
            policy = self.store.create(Policy, actor=actor, **fields)
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_CREATE,
                event_type="insurance.policy.create",
                instance=policy,
                request=request,
            )
            return policy

        policy = self.store.transaction(_create)
        logger.info("Policy %s created", policy.pk)
        return policy

    def update(self, *, actor, policy: Policy, data: dict, request=None) -> Policy:
        fields = prepare_policy_fields(data, existing=policy)
        # Status only moves through transition()/cancel().
        fields.pop("status", None)
        before = snapshot(policy)

        def _update():
            updated = self.store.update(policy, actor=actor, **fields)
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_UPDATE,
                event_type="insurance.policy.update",
                instance=updated,
                request=request,
                data_before=before,
            )
            return updated

        return self.store.transaction(_update)

    def transition(self, *, actor, policy: Policy, to_status: str, request=None, **changes) -> Policy:
        to_status = str(to_status or "").strip().upper()
        if to_status not in Policy.Status.values:
            raise ValidationError({"status": f"Unknown policy status '{to_status}'."})
        if to_status == Policy.Status.CANCELLED:
            return self.cancel(
                actor=actor,
                policy=policy,
                reason=changes.get("cancellation_reason", ""),
                cancellation_date=changes.get("cancellation_date"),
                request=request,
            )
        return self._apply_transition(
            actor=actor, policy=policy, to_status=to_status, request=request
        )

    def cancel(
        self,
        *,
        actor,
        policy: Policy,
        reason: str = "",
        cancellation_date: date | None = None,
        request=None,
    ) -> Policy:
        changes = {
            "cancellation_date": cancellation_date
            or policy.cancellation_date
            or timezone.localdate(),
        }
        if reason:
            changes["cancellation_reason"] = reason.strip()
        return self._apply_transition(
            actor=actor,
            policy=policy,
            to_status=Policy.Status.CANCELLED,
            request=request,
            changes=changes,
            action="cancel",
        )

    def record_installment_payment(self, *, actor, policy: Policy, request=None) -> Policy:
        """Count one more installment as paid and recompute the pending count."""

        if policy.status in (Policy.Status.CANCELLED, Policy.Status.EXPIRED):
            raise InvalidStateError.for_action(
                entity="policy", current_status=policy.status, action="record installment"
            )
        fields = prepare_policy_fields(
            {"paid_installments": policy.paid_installments + 1}, existing=policy
        )
        before = snapshot(policy)

        def _record():
            updated = self.store.update(policy, actor=actor, **fields)
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_UPDATE,
                event_type="insurance.policy.installment_paid",
                instance=updated,
                request=request,
                data_before=before,
            )
            return updated

        return self.store.transaction(_record)

    def calculate_total_paid(self, policy: Policy) -> Decimal:
        return policy.calculate_total_paid()

    def calculate_outstanding_balance(self, policy: Policy) -> Decimal:
        return policy.calculate_outstanding_balance()

    def is_active(self, policy: Policy, on: date | None = None) -> bool:
        return policy.is_active(on)

    def balance(self, policy: Policy) -> dict:
        total_paid = policy.calculate_total_paid()
        return {
            "policy_id": policy.pk,
            "policy_number": policy.policy_number,
            "effective_premium": policy.effective_premium,
            "total_paid": total_paid,
            "outstanding_balance": policy.calculate_outstanding_balance(),
            "payment_progress": policy.payment_progress(),
            "paid_installments": policy.paid_installments,
            "pending_installments": policy.pending_installments,
        }

    def installments(self, policy: Policy) -> list[dict]:
        schedule = installment_schedule(
            effective_premium=policy.effective_premium,
            down_payment=policy.down_payment,
            total_installments=policy.total_installments,
            first_due_date=policy.policy_start_date,
            frequency=policy.installment_frequency,
        )
        for item in schedule:
            item["paid"] = item["number"] <= policy.paid_installments
        return schedule

    def expire_ended_policies(self, *, actor=None, on: date | None = None) -> int:
        on = on or timezone.localdate()
        # Only ACTIVE rows past their end date; EXPIRED ones are already done.
        ended = self.store.find_all(
            Policy, expired_policies(on) & ~Q(status=Policy.Status.EXPIRED), order_by=("id",)
        )
        count = 0
        for policy in ended:
            self._apply_transition(actor=actor, policy=policy, to_status=Policy.Status.EXPIRED)
            count += 1
        if count:
            logger.info("Expired %s ended policy(ies)", count)
        return count

    def _apply_transition(
        self,
        *,
        actor,
        policy: Policy,
        to_status: str,
        request=None,
        changes: dict | None = None,
        action: str | None = None,
    ) -> Policy:
        action = action or f"move to {to_status}"
        if to_status not in allowed_transitions(policy.status):
            raise InvalidStateError.for_action(
                entity="policy", current_status=policy.status, action=action
            )
        from_status = policy.status
        before = snapshot(policy)

        def _apply():
            updated = self.store.update(policy, actor=actor, status=to_status, **(changes or {}))
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_TRANSITION,
                event_type=f"insurance.policy.{to_status.lower()}",
                instance=updated,
                request=request,
                data_before=before,
                metadata={"from_status": from_status, "to_status": to_status},
            )
            return updated

        return self.store.transaction(_apply)
