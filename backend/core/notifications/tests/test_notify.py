from unittest import mock

from django.core import mail
from django.test import SimpleTestCase, override_settings

from notifications import NotificationEvent, notify
from notifications import events
from notifications.channels import NotificationDeliveryError, get_channel
from notifications.channels.base import NotificationChannelNotSupported
from notifications.templates import render, render_event


class TemplateTests(SimpleTestCase):
    def test_unknown_placeholders_are_left_in_place(self):
        self.assertEqual(render("Hi {name}, {missing}", {"name": "Amina"}), "Hi Amina, {missing}")

    def test_default_wording_by_kind(self):
        event = NotificationEvent(
            kind=events.PAYMENT_DUE,
            recipient_name="Amina Otieno",
            context={"policy_number": "POL-1", "amount": "100.00", "due_date": "2026-05-01"},
        )
        rendered = render_event(event)
        self.assertEqual(rendered["subject"], "Payment Reminder - Policy POL-1")
        self.assertIn("Dear Amina Otieno", rendered["email"])
        self.assertIn("100.00 due for policy POL-1", rendered["sms"])

    def test_custom_templates_override_defaults(self):
        event = NotificationEvent(
            kind=events.POLICY_EXPIRY,
            context={"policy_number": "POL-2"},
            email_subject="Renew {policy_number}",
            sms_template="Renew now",
        )
        rendered = render_event(event)
        self.assertEqual(rendered["subject"], "Renew POL-2")
        self.assertEqual(rendered["sms"], "Renew now")


@override_settings(NOTIFICATION_CHANNELS=["email", "sms"])
class NotifyTests(SimpleTestCase):
    def _event(self, **extra):
        fields = {
            "kind": events.POLICY_EXPIRY,
            "recipient_name": "Amina",
            "email": "amina@example.com",
            "phone": "+254700000001",
            "context": {"policy_number": "POL-3", "policy_end_date": "2026-12-31"},
        }
        fields.update(extra)
        return NotificationEvent(**fields)

    def test_sends_email_and_sms(self):
        results = notify(self._event())
        self.assertEqual([r["type"] for r in results], ["email", "sms"])
        self.assertTrue(all(r["success"] for r in results))
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["amina@example.com"])

    def test_skips_channels_without_an_address(self):
        results = notify(self._event(email="", channels=("email", "sms")))
        self.assertEqual([r["type"] for r in results], ["sms"])
        self.assertEqual(len(mail.outbox), 0)

    @override_settings(NOTIFICATION_CHANNELS=["sms"])
    def test_disabled_channels_are_ignored(self):
        results = notify(self._event())
        self.assertEqual([r["type"] for r in results], ["sms"])

    def test_delivery_failure_is_reported_not_raised(self):
        channel = mock.Mock()
        channel.can_deliver.return_value = True
        channel.send.side_effect = NotificationDeliveryError("gateway down")
        with mock.patch("notifications.service.get_channel", return_value=channel):
            results = notify(self._event(channels=("sms",)))
        self.assertEqual(results, [{"type": "sms", "success": False, "error": "gateway down"}])

    def test_unexpected_failure_is_reported_not_raised(self):
        with mock.patch("notifications.service.get_channel", side_effect=RuntimeError("boom")):
            results = notify(self._event())
        self.assertFalse(any(r["success"] for r in results))

    def test_unknown_channel(self):
        with self.assertRaises(NotificationChannelNotSupported):
            get_channel("pigeon")
