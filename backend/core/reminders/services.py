"""Reminder rules and their daily dispatch."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Iterator

from django.utils import timezone

from common.errors import InvalidStateError
from common.persistence import Store
from insurance.models import Policy
from ledger.events import publish_event
from ledger.models import LedgerEntry
from ledger.services import snapshot
from notifications import NotificationEvent, notify
from notifications import events as notification_events
from payments.models import Payment
from reminders.models import Reminder

logger = logging.getLogger(__name__)

_EVENT_KINDS = {
    Reminder.Type.PAYMENT_DUE: notification_events.PAYMENT_DUE,
    Reminder.Type.POLICY_EXPIRY: notification_events.POLICY_EXPIRY,
    Reminder.Type.DOCUMENT_REQUIRED: notification_events.DOCUMENT_REQUIRED,
    Reminder.Type.CANCELLATION_WARNING: notification_events.CANCELLATION_WARNING,
}


def _policy_context(policy: Policy) -> dict:
    return {
        "policy_number": policy.policy_number,
        "policy_end_date": policy.policy_end_date,
        "overdue_installments": policy.overdue_installments,
        "outstanding_balance": policy.calculate_outstanding_balance(),
    }


class ReminderService:
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

    def create(self, *, actor, data: dict, request=None) -> Reminder:
        def _create():
            reminder = self.store.create(Reminder, actor=actor, **data)
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_CREATE,
                event_type="reminders.reminder.create",
                instance=reminder,
                request=request,
            )
            return reminder

        return self.store.transaction(_create)

    def update(self, *, actor, reminder: Reminder, data: dict, request=None) -> Reminder:
        before = snapshot(reminder)

        def _update():
            updated = self.store.update(reminder, actor=actor, **data)
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_UPDATE,
                event_type="reminders.reminder.update",
                instance=updated,
                request=request,
                data_before=before,
            )
            return updated

        return self.store.transaction(_update)

    def delete(self, *, actor, reminder: Reminder, request=None) -> None:
        before = snapshot(reminder)

        def _delete():
            reminder.soft_delete(actor=actor)
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_DELETE,
                event_type="reminders.reminder.delete",
                instance=reminder,
                request=request,
                data_before=before,
                deleted=True,
            )

        self.store.transaction(_delete)

    def mark_complete(self, *, actor, reminder: Reminder, request=None) -> Reminder:
        if reminder.completed_at is not None:
            raise InvalidStateError.for_action(
                entity="reminder", current_status="completed", action="mark complete"
            )
        before = snapshot(reminder)

        def _complete():
            updated = self.store.update(
                reminder, actor=actor, completed_at=self.clock(), is_active=False
            )
            publish_event(
                actor=actor,
                action=LedgerEntry.ACTION_TRANSITION,
                event_type="reminders.reminder.complete",
                instance=updated,
                request=request,
                data_before=before,
            )
            return updated

        return self.store.transaction(_complete)

    def dispatch_due_reminders(self, today: date | None = None) -> dict:
        """Send every notification whose trigger falls on ``today``.

        Returns per-type counts of notifications attempted. Delivery failures
        are logged by the notifier and do not stop the run.
        """

        today = today or timezone.localdate(self.clock())
        rules = self.store.find_all(
            Reminder, {"is_active": True, "completed_at__isnull": True}, order_by=("id",)
        ).select_related("product")

        sent: dict[str, int] = {}
        for rule in rules:
            if not rule.channels:
                continue
            for event in self._events_for(rule, today):
                self.notifier(event)
                sent[rule.reminder_type] = sent.get(rule.reminder_type, 0) + 1
        logger.info("Reminder dispatch for %s: %s", today, sent or "nothing due")
        return {"date": today, "sent": sent, "total": sum(sent.values())}

    def _events_for(self, rule: Reminder, today: date) -> Iterator[NotificationEvent]:
        target = today + timedelta(days=rule.trigger_days)
        kind = _EVENT_KINDS[rule.reminder_type]

        if rule.reminder_type == Reminder.Type.PAYMENT_DUE:
            payments = Payment.objects.filter(
                status=Payment.Status.PENDING,
                due_date=target,
                policy__product=rule.product,
            ).select_related("client", "policy")
            for payment in payments:
                yield self._event(
                    rule,
                    kind,
                    payment.client,
                    {
                        **_policy_context(payment.policy),
                        "amount": payment.amount,
                        "due_date": payment.due_date,
                    },
                )
            return

        if rule.reminder_type == Reminder.Type.CANCELLATION_WARNING:
            # Warns about installments that have been overdue for trigger_days.
            overdue_since = today - timedelta(days=rule.trigger_days)
            payments = Payment.objects.filter(
                status=Payment.Status.PENDING,
                due_date=overdue_since,
                policy__product=rule.product,
                policy__status=Policy.Status.ACTIVE,
            ).select_related("client", "policy")
            for payment in payments:
                yield self._event(
                    rule,
                    kind,
                    payment.client,
                    {
                        **_policy_context(payment.policy),
                        "amount": payment.amount,
                        "due_date": payment.due_date,
                    },
                )
            return

        policies = Policy.objects.filter(product=rule.product, status=Policy.Status.ACTIVE)
        if rule.reminder_type == Reminder.Type.POLICY_EXPIRY:
            policies = policies.filter(policy_end_date=target)
        else:
            policies = policies.filter(policy_start_date=target, is_valued=False)
        for policy in policies.select_related("client"):
            yield self._event(rule, kind, policy.client, _policy_context(policy))

    @staticmethod
    def _event(rule: Reminder, kind: str, client, context: dict) -> NotificationEvent:
        return NotificationEvent(
            kind=kind,
            recipient_name=client.full_name,
            email=client.email,
            phone=client.phone,
            context={"product_name": rule.product.name, **context},
            channels=rule.channels,
            email_subject=rule.email_subject,
            email_template=rule.email_template,
            sms_template=rule.sms_template,
        )
