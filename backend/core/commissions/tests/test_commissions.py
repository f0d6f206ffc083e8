from datetime import date, datetime, timezone as dt_timezone
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, TestCase, override_settings
from rest_framework import status
from rest_framework.test import APIClient

from commissions.engine import calculate_commission
from commissions.models import Commission
from commissions.services import CommissionService
from commissions.transforms import prepare_commission_fields
from common.errors import InvalidStateError
from common.persistence import DjangoStore
from insurance.tests.factories import make_intermediary, make_policy, make_user

FIXED_NOW = datetime(2026, 4, 15, 8, 0, tzinfo=dt_timezone.utc)


class CalculateCommissionTests(SimpleTestCase):
    def test_rate_is_a_percentage(self):
        self.assertEqual(calculate_commission(Decimal("5000"), Decimal("12.5")), Decimal("625.00"))

    def test_rounds_half_up_to_cents(self):
        self.assertEqual(calculate_commission("333.33", "10"), Decimal("33.33"))
        self.assertEqual(calculate_commission("0.05", "10"), Decimal("0.01"))


class PrepareCommissionFieldsTests(SimpleTestCase):
    @override_settings(COMMISSION_DUE_DAYS=45)
    def test_fills_due_date_and_period(self):
        fields = prepare_commission_fields({"amount": "10.456"}, today=date(2026, 1, 31))
        self.assertEqual(fields["amount"], Decimal("10.46"))
        self.assertEqual(fields["due_date"], date(2026, 3, 17))
        self.assertEqual(fields["period"], "2026-01")

    def test_negative_amount_is_rejected(self):
        with self.assertRaises(ValidationError):
            prepare_commission_fields({"amount": Decimal("-5")}, today=date(2026, 1, 1))

    def test_missing_amount_without_policy_is_rejected(self):
        with self.assertRaises(ValidationError):
            prepare_commission_fields({"rate": "10"}, today=date(2026, 1, 1))


class CommissionServiceTests(TestCase):
    def setUp(self):
        self.accountant = make_user(role="accountant")
        self.service = CommissionService(store=DjangoStore(), clock=lambda: FIXED_NOW)
        self.intermediary = make_intermediary()
        self.policy = make_policy(intermediary=self.intermediary, annual_premium=Decimal("5000.00"))

    def _create(self, **extra):
        data = {"policy": self.policy, "rate": Decimal("12.50")}
        data.update(extra)
        return self.service.create(actor=self.accountant, data=data)

    def test_create_derives_amount_and_links_from_policy(self):
        commission = self._create()
        self.assertEqual(commission.amount, Decimal("625.00"))
        self.assertEqual(commission.intermediary_id, self.intermediary.pk)
        self.assertEqual(commission.product_id, self.policy.product_id)
        self.assertEqual(commission.period, "2026-04")
        self.assertEqual(commission.status, Commission.Status.PENDING)

    def test_negative_amount_writes_nothing(self):
        with self.assertRaises(ValidationError):
            self._create(amount=Decimal("-5"))
        self.assertFalse(Commission.objects.exists())

    def test_approve_then_mark_paid(self):
        commission = self.service.approve(actor=self.accountant, commission=self._create())
        self.assertEqual(commission.status, Commission.Status.APPROVED)
        self.assertEqual(commission.processed_by, self.accountant)

        commission = self.service.mark_as_paid(
            actor=self.accountant, commission=commission, payment_reference=" BANK-77 "
        )
        self.assertEqual(commission.status, Commission.Status.PAID)
        self.assertEqual(commission.payment_reference, "BANK-77")
        self.assertEqual(commission.paid_date, FIXED_NOW)

    def test_mark_paid_requires_approval(self):
        commission = self._create()
        with self.assertRaises(InvalidStateError):
            self.service.mark_as_paid(
                actor=self.accountant, commission=commission, payment_reference="X"
            )

    def test_mark_paid_requires_reference(self):
        commission = self.service.approve(actor=self.accountant, commission=self._create())
        with self.assertRaises(ValidationError):
            self.service.mark_as_paid(actor=self.accountant, commission=commission, payment_reference="")

    def test_dispute_appends_notes(self):
        commission = self._create(notes="Q1 batch")
        commission = self.service.dispute(
            actor=self.accountant, commission=commission, notes="Rate should be 10%"
        )
        self.assertEqual(commission.status, Commission.Status.DISPUTED)
        self.assertEqual(commission.notes, "Q1 batch\nRate should be 10%")

    def test_update_only_while_pending(self):
        commission = self._create()
        commission = self.service.update(
            actor=self.accountant, commission=commission, data={"amount": Decimal("600")}
        )
        self.assertEqual(commission.amount, Decimal("600.00"))
        commission = self.service.cancel(actor=self.accountant, commission=commission)
        with self.assertRaises(InvalidStateError):
            self.service.update(actor=self.accountant, commission=commission, data={"notes": "x"})

    def test_process_batch_is_all_or_nothing(self):
        approved = self.service.approve(actor=self.accountant, commission=self._create())
        pending = self._create()

        with self.assertRaises(InvalidStateError):
            self.service.process_batch(
                actor=self.accountant,
                commission_ids=[approved.pk, pending.pk],
                payment_reference="BATCH-1",
            )
        approved.refresh_from_db()
        self.assertEqual(approved.status, Commission.Status.APPROVED)

        paid = self.service.process_batch(
            actor=self.accountant, commission_ids=[approved.pk], payment_reference="BATCH-1"
        )
        self.assertEqual([c.status for c in paid], [Commission.Status.PAID])

    def test_process_batch_rejects_unknown_ids(self):
        with self.assertRaises(ValidationError):
            self.service.process_batch(
                actor=self.accountant, commission_ids=[424242], payment_reference="B"
            )


class CommissionAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=make_user(role="accountant"))
        self.policy = make_policy(intermediary=make_intermediary())

    def test_calculate(self):
        response = self.client.post(
            "/api/commissions/calculate/", {"premium": "5000", "rate": "12.5"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["commission"], Decimal("625.00"))

    def test_negative_amount_is_400_and_creates_nothing(self):
        response = self.client.post(
            "/api/commissions/",
            {"policy": self.policy.pk, "amount": "-5.00", "rate": "10.00"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("amount", response.data["errors"])
        self.assertFalse(Commission.objects.exists())

    def test_approve_and_pay(self):
        response = self.client.post(
            "/api/commissions/",
            {"policy": self.policy.pk, "amount": "120.00", "rate": "10.00"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        pk = response.data["id"]

        response = self.client.post(f"/api/commissions/{pk}/approve/")
        self.assertEqual(response.data["status"], Commission.Status.APPROVED)

        response = self.client.post(
            f"/api/commissions/{pk}/mark-paid/", {"payment_reference": "EFT-9"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], Commission.Status.PAID)

        response = self.client.post(f"/api/commissions/{pk}/cancel/")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_agents_cannot_see_commissions(self):
        self.client.force_authenticate(user=make_user(role="agent"))
        response = self.client.get("/api/commissions/")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
