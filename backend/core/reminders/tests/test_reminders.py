from datetime import date, timedelta
from decimal import Decimal
from io import StringIO
from unittest import mock

from django.core.management import call_command
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from common.errors import InvalidStateError
from common.persistence import DjangoStore
from insurance.models import Policy
from insurance.tests.factories import make_client, make_policy, make_product, make_user
from notifications import events
from payments.models import Payment
from reminders.models import Reminder
from reminders.services import ReminderService

TODAY = date(2026, 6, 1)


class DispatchDueRemindersTests(TestCase):
    def setUp(self):
        self.notifier = mock.Mock(return_value=[])
        self.service = ReminderService(store=DjangoStore(), notifier=self.notifier)
        self.product = make_product()
        self.policy = make_policy(
            product=self.product,
            client=make_client(first_name="Amina", last_name="Otieno"),
            policy_start_date=TODAY - timedelta(days=100),
            policy_end_date=TODAY + timedelta(days=30),
        )

    def _rule(self, reminder_type, trigger_days, **extra):
        return Reminder.objects.create(
            product=self.product, reminder_type=reminder_type, trigger_days=trigger_days, **extra
        )

    def _installment(self, due_date, status=Payment.Status.PENDING):
        return Payment.objects.create(
            client=self.policy.client,
            policy=self.policy,
            amount=Decimal("100.00"),
            payment_method=Payment.Method.MPESA,
            status=status,
            due_date=due_date,
        )

    def _sent_kinds(self):
        return [c.args[0].kind for c in self.notifier.call_args_list]

    def test_payment_due_fires_trigger_days_before_due_date(self):
        self._rule(Reminder.Type.PAYMENT_DUE, 3)
        self._installment(TODAY + timedelta(days=3))
        self._installment(TODAY + timedelta(days=4))
        self._installment(TODAY + timedelta(days=3), status=Payment.Status.COMPLETED)

        result = self.service.dispatch_due_reminders(TODAY)

        self.assertEqual(result["total"], 1)
        self.assertEqual(result["sent"], {Reminder.Type.PAYMENT_DUE: 1})
        event = self.notifier.call_args.args[0]
        self.assertEqual(event.kind, events.PAYMENT_DUE)
        self.assertEqual(event.recipient_name, "Amina Otieno")
        self.assertEqual(event.context["policy_number"], self.policy.policy_number)
        self.assertEqual(event.context["amount"], Decimal("100.00"))

    def test_policy_expiry(self):
        self._rule(Reminder.Type.POLICY_EXPIRY, 30, sms_enabled=False)
        self.service.dispatch_due_reminders(TODAY)
        self.assertEqual(self._sent_kinds(), [events.POLICY_EXPIRY])
        self.assertEqual(self.notifier.call_args.args[0].channels, ("email",))

    def test_cancellation_warning_looks_back(self):
        self._rule(Reminder.Type.CANCELLATION_WARNING, 7)
        self._installment(TODAY - timedelta(days=7))
        self._installment(TODAY + timedelta(days=7))
        self.service.dispatch_due_reminders(TODAY)
        self.assertEqual(self._sent_kinds(), [events.CANCELLATION_WARNING])

    def test_document_required_only_for_unvalued_policies(self):
        self._rule(Reminder.Type.DOCUMENT_REQUIRED, 0)
        make_policy(
            product=self.product,
            policy_start_date=TODAY,
            policy_end_date=TODAY + timedelta(days=365),
        )
        make_policy(
            product=self.product,
            policy_start_date=TODAY,
            policy_end_date=TODAY + timedelta(days=365),
            is_valued=True,
        )
        result = self.service.dispatch_due_reminders(TODAY)
        self.assertEqual(result["total"], 1)

    def test_inactive_completed_and_silent_rules_are_skipped(self):
        self._rule(Reminder.Type.POLICY_EXPIRY, 30, is_active=False)
        self._rule(Reminder.Type.POLICY_EXPIRY, 30, email_enabled=False, sms_enabled=False)
        done = self._rule(Reminder.Type.POLICY_EXPIRY, 30)
        self.service.mark_complete(actor=None, reminder=done)

        result = self.service.dispatch_due_reminders(TODAY)
        self.assertEqual(result["total"], 0)
        self.notifier.assert_not_called()

    def test_cancelled_policies_get_no_expiry_notice(self):
        self._rule(Reminder.Type.POLICY_EXPIRY, 30)
        Policy.objects.filter(pk=self.policy.pk).update(
            status=Policy.Status.CANCELLED, cancellation_date=TODAY
        )
        self.assertEqual(self.service.dispatch_due_reminders(TODAY)["total"], 0)


class ReminderLifecycleTests(TestCase):
    def setUp(self):
        self.agent = make_user(role="agent")
        self.service = ReminderService(store=DjangoStore(), notifier=mock.Mock())
        self.product = make_product()

    def test_mark_complete_twice_conflicts(self):
        reminder = self.service.create(
            actor=self.agent,
            data={"product": self.product, "reminder_type": "payment_due", "trigger_days": 5},
        )
        reminder = self.service.mark_complete(actor=self.agent, reminder=reminder)
        self.assertIsNotNone(reminder.completed_at)
        self.assertFalse(reminder.is_active)
        with self.assertRaises(InvalidStateError):
            self.service.mark_complete(actor=self.agent, reminder=reminder)

    def test_delete_is_soft(self):
        reminder = self.service.create(
            actor=self.agent,
            data={"product": self.product, "reminder_type": "policy_expiry", "trigger_days": 30},
        )
        self.service.delete(actor=self.agent, reminder=reminder)
        self.assertFalse(Reminder.objects.filter(pk=reminder.pk).exists())
        self.assertTrue(Reminder.all_objects.filter(pk=reminder.pk).exists())


class ReminderAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.product = make_product()

    def test_agent_manages_rules_but_cannot_dispatch(self):
        self.client.force_authenticate(user=make_user(role="agent"))
        response = self.client.post(
            "/api/reminders/",
            {"product": self.product.pk, "reminder_type": "payment_due", "trigger_days": 3},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

        response = self.client.patch(f"/api/reminders/{response.data['id']}/mark-complete/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNotNone(response.data["completed_at"])

        response = self.client.post("/api/reminders/dispatch/", {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_negative_trigger_days_rejected(self):
        self.client.force_authenticate(user=make_user(role="agent"))
        response = self.client.post(
            "/api/reminders/",
            {"product": self.product.pk, "reminder_type": "payment_due", "trigger_days": -1},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_admin_dispatch(self):
        self.client.force_authenticate(user=make_user(role="admin"))
        response = self.client.post("/api/reminders/dispatch/", {"date": "2026-06-01"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total"], 0)


class RunDailyJobsCommandTests(TestCase):
    def test_runs_sweeps(self):
        ended = make_policy(
            policy_start_date=TODAY - timedelta(days=400),
            policy_end_date=TODAY - timedelta(days=1),
        )
        out = StringIO()
        call_command("run_daily_jobs", "--date", TODAY.isoformat(), "--skip-reminders", stdout=out)
        ended.refresh_from_db()
        self.assertEqual(ended.status, Policy.Status.EXPIRED)
        self.assertIn("policies_expired=1", out.getvalue())
