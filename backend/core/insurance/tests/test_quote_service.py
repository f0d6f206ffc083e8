from datetime import datetime, timedelta
from decimal import Decimal
from unittest import mock

from django.core.exceptions import ValidationError
from django.test import TestCase
from django.utils import timezone

from common.errors import ExpiredError, InvalidStateError
from common.persistence import DjangoStore
from insurance.models import Policy, Quote
from insurance.services.quote_service import QuoteService
from insurance.tests.factories import make_client, make_product, make_quote, make_user
from ledger.models import LedgerEntry


class QuoteServiceTests(TestCase):
    def setUp(self):
        self.agent = make_user(role="agent")
        self.service = QuoteService(store=DjangoStore())
        self.client_obj = make_client()
        self.product = make_product()

    def test_create_computes_total_and_defaults(self):
        quote = self.service.create(
            actor=self.agent,
            data={
                "client": self.client_obj,
                "product": self.product,
                "sum_insured": Decimal("500000"),
                "base_premium": Decimal("1000"),
                "discounts": [{"amount": "100"}],
                "loadings": [{"amount": "50"}],
                "taxes": [{"rate": "10"}],
                "fees": [{"amount": "20"}],
            },
        )
        self.assertEqual(quote.total_premium, Decimal("1065.00"))
        self.assertEqual(quote.status, Quote.Status.DRAFT)
        self.assertTrue(quote.quote_number.startswith("QTE-"))
        self.assertEqual((quote.valid_to - quote.valid_from).days, 30)
        self.assertEqual(quote.created_by, self.agent)
        self.assertTrue(
            LedgerEntry.objects.filter(event_type="insurance.quote.create", resource_pk=str(quote.pk)).exists()
        )

    def test_update_recomputes_total_from_stored_inputs(self):
        quote = make_quote(client=self.client_obj, product=self.product, status=Quote.Status.DRAFT)
        quote = self.service.update(
            actor=self.agent, quote=quote, data={"fees": [{"amount": "15"}]}
        )
        self.assertEqual(quote.total_premium, Decimal("1015.00"))

    def test_submit_then_approve(self):
        quote = make_quote(status=Quote.Status.DRAFT)
        quote = self.service.submit(actor=self.agent, quote=quote)
        self.assertEqual(quote.status, Quote.Status.PENDING)
        quote = self.service.approve(actor=self.agent, quote=quote)
        self.assertEqual(quote.status, Quote.Status.APPROVED)
        self.assertEqual(quote.approved_by, self.agent)

    def test_approve_from_draft_is_refused_and_unchanged(self):
        quote = make_quote(status=Quote.Status.DRAFT)
        with self.assertRaises(InvalidStateError) as ctx:
            self.service.approve(actor=self.agent, quote=quote)
        self.assertEqual(ctx.exception.current_status, Quote.Status.DRAFT)
        quote.refresh_from_db()
        self.assertEqual(quote.status, Quote.Status.DRAFT)
        self.assertIsNone(quote.approved_at)

    def test_decline_requires_reason(self):
        quote = make_quote()
        with self.assertRaises(ValidationError):
            self.service.decline(actor=self.agent, quote=quote, reason="  ")
        quote = self.service.decline(actor=self.agent, quote=quote, reason="Risk too high")
        self.assertEqual(quote.status, Quote.Status.DECLINED)
        self.assertEqual(quote.decline_reason, "Risk too high")

    def test_expire_stale_only_touches_pending_out_of_window(self):
        now = timezone.now()
        stale = make_quote(valid_from=now - timedelta(days=40), valid_to=now - timedelta(days=10))
        fresh = make_quote()
        self.assertEqual(self.service.expire_stale(now=now), 1)
        stale.refresh_from_db()
        fresh.refresh_from_db()
        self.assertEqual(stale.status, Quote.Status.EXPIRED)
        self.assertEqual(fresh.status, Quote.Status.PENDING)


class QuoteConversionTests(TestCase):
    def setUp(self):
        self.agent = make_user(role="agent")
        self.service = QuoteService(store=DjangoStore())

    def test_convert_creates_active_policy(self):
        quote = make_quote(total_premium=Decimal("1065.00"))
        policy = self.service.convert_to_policy(actor=self.agent, quote=quote)

        self.assertEqual(policy.policy_number, f"POL-{quote.quote_number}")
        self.assertEqual(policy.status, Policy.Status.ACTIVE)
        self.assertEqual(policy.annual_premium, Decimal("1065.00"))
        self.assertEqual(policy.policy_start_date, timezone.localdate())
        self.assertEqual(policy.policy_end_date, timezone.localdate(quote.valid_to))
        self.assertEqual(policy.client, quote.client)
        self.assertEqual(policy.created_by, self.agent)

        quote.refresh_from_db()
        self.assertEqual(quote.status, Quote.Status.CONVERTED)
        self.assertEqual(quote.converted_by, self.agent)
        self.assertIsNotNone(quote.converted_at)

    def test_convert_on_last_validity_day_ends_policy_next_day(self):
        now = timezone.make_aware(datetime(2026, 3, 10, 12, 0))
        quote = make_quote(valid_from=now - timedelta(days=5), valid_to=now + timedelta(minutes=1))
        service = QuoteService(store=DjangoStore(), clock=lambda: now)

        policy = service.convert_to_policy(actor=self.agent, quote=quote)

        self.assertEqual(policy.policy_start_date, timezone.localdate(now))
        self.assertEqual(policy.policy_end_date, timezone.localdate(now) + timedelta(days=1))
        quote.refresh_from_db()
        self.assertEqual(quote.status, Quote.Status.CONVERTED)

    def test_convert_requires_pending(self):
        quote = make_quote(status=Quote.Status.DRAFT)
        with self.assertRaises(InvalidStateError):
            self.service.convert_to_policy(actor=self.agent, quote=quote)
        self.assertFalse(Policy.objects.exists())

    def test_convert_outside_window_raises_expired(self):
        now = timezone.now()
        quote = make_quote(valid_from=now - timedelta(days=40), valid_to=now - timedelta(days=1))
        with self.assertRaises(ExpiredError):
            self.service.convert_to_policy(actor=self.agent, quote=quote)
        quote.refresh_from_db()
        self.assertEqual(quote.status, Quote.Status.PENDING)
        self.assertFalse(Policy.objects.exists())

    def test_failed_quote_update_rolls_back_policy(self):
        quote = make_quote()
        store = DjangoStore()
        original_update = store.update

        def failing_update(instance, **patch):
            if isinstance(instance, Quote):
                raise ValidationError("quote write failed")
            return original_update(instance, **patch)

        service = QuoteService(store=store)
        with mock.patch.object(store, "update", side_effect=failing_update):
            with self.assertRaises(ValidationError):
                service.convert_to_policy(actor=self.agent, quote=quote)

        self.assertFalse(Policy.objects.exists())
        quote.refresh_from_db()
        self.assertEqual(quote.status, Quote.Status.PENDING)

    def test_second_conversion_is_refused(self):
        quote = make_quote()
        self.service.convert_to_policy(actor=self.agent, quote=quote)
        with self.assertRaises(InvalidStateError):
            self.service.convert_to_policy(actor=self.agent, quote=quote)
        self.assertEqual(Policy.objects.count(), 1)
