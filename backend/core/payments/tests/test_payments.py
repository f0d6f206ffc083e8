from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from common.errors import InvalidStateError
from common.persistence import DjangoStore
from insurance.models import Claim
from insurance.tests.factories import make_claim, make_policy, make_user
from payments.models import Payment
from payments.selectors import client_payment_summary
from payments.services import PaymentService

FIXED_NOW = datetime(2026, 3, 1, 9, 30, tzinfo=dt_timezone.utc)


class PaymentServiceTests(TestCase):
    def setUp(self):
        self.accountant = make_user(role="accountant")
        self.service = PaymentService(store=DjangoStore(), clock=lambda: FIXED_NOW)
        self.policy = make_policy()

    def _pending(self, transaction_id="tx-001", amount="100.00"):
        return self.service.create(
            actor=self.accountant,
            data={
                "policy": self.policy,
                "amount": Decimal(amount),
                "payment_method": Payment.Method.MPESA,
                "transaction_id": transaction_id,
            },
        )

    def test_create_normalizes_fields_and_defaults_client(self):
        payment = self._pending(transaction_id="  tx-abc ")
        self.assertEqual(payment.transaction_id, "TX-ABC")
        self.assertEqual(payment.client_id, self.policy.client_id)
        self.assertEqual(payment.status, Payment.Status.PENDING)

    def test_mark_as_completed_is_idempotent(self):
        payment = self._pending()
        self.assertTrue(
            self.service.mark_as_completed(transaction_id="TX-001", mpesa_code="qwe123")
        )
        payment.refresh_from_db()
        self.assertEqual(payment.status, Payment.Status.COMPLETED)
        self.assertEqual(payment.payment_date, FIXED_NOW)
        self.assertEqual(payment.mpesa_code, "QWE123")

        self.assertFalse(self.service.mark_as_completed(transaction_id="TX-001"))
        self.assertFalse(self.service.mark_as_completed(transaction_id="unknown"))

    def test_completed_payment_cannot_be_edited(self):
        payment = self._pending()
        self.service.mark_as_completed(transaction_id="TX-001")
        payment.refresh_from_db()
        with self.assertRaises(InvalidStateError):
            self.service.update(actor=self.accountant, payment=payment, data={"notes": "late"})

    def test_generic_payment_cannot_settle_a_claim(self):
        claim = make_claim(
            policy=self.policy,
            status=Claim.Status.APPROVED,
            approved_amount=Decimal("500.00"),
        )
        with self.assertRaises(ValidationError) as ctx:
            self.service.create(
                actor=self.accountant,
                data={
                    "policy": self.policy,
                    "claim": claim,
                    "amount": Decimal("500.00"),
                    "payment_method": Payment.Method.BANK_TRANSFER,
                    "payment_type": Payment.Type.CLAIM_SETTLEMENT,
                    "status": Payment.Status.COMPLETED,
                },
            )
        self.assertIn("claim", ctx.exception.message_dict)
        self.assertIn("payment_type", ctx.exception.message_dict)
        self.assertFalse(Payment.objects.exists())
        claim.refresh_from_db()
        self.assertEqual(claim.paid_amount, Decimal("0.00"))
        self.assertEqual(self.policy.calculate_total_paid(), Decimal("0"))

    def test_create_refuses_terminal_statuses(self):
        with self.assertRaises(ValidationError) as ctx:
            self.service.create(
                actor=self.accountant,
                data={
                    "policy": self.policy,
                    "amount": Decimal("100.00"),
                    "payment_method": Payment.Method.CASH,
                    "status": Payment.Status.REFUNDED,
                },
            )
        self.assertIn("status", ctx.exception.message_dict)

    def test_claim_settlement_row_cannot_carry_a_policy(self):
        claim = make_claim(policy=self.policy, status=Claim.Status.APPROVED)
        payment = Payment(
            client=self.policy.client,
            policy=self.policy,
            claim=claim,
            amount=Decimal("10.00"),
            payment_method=Payment.Method.CASH,
            payment_type=Payment.Type.CLAIM_SETTLEMENT,
        )
        with self.assertRaises(ValidationError) as ctx:
            payment.full_clean()
        self.assertIn("policy", ctx.exception.message_dict)

    def test_summary_counts_completed_only(self):
        for tx, method in (("A", Payment.Method.MPESA), ("B", Payment.Method.MPESA), ("C", Payment.Method.CASH)):
            Payment.objects.create(
                client=self.policy.client,
                policy=self.policy,
                amount=Decimal("100.00"),
                payment_method=method,
                status=Payment.Status.COMPLETED,
                transaction_id=tx,
            )
        self._pending(transaction_id="D", amount="999.00")

        summary = client_payment_summary(self.policy.client_id)
        self.assertEqual(summary["count"], 3)
        self.assertEqual(summary["total"], Decimal("300.00"))
        self.assertEqual(summary["average"], Decimal("100.00"))
        self.assertEqual(summary["by_method"]["MPESA"]["count"], 2)
        self.assertEqual(summary["by_method"]["CASH"]["total"], Decimal("100.00"))


class PaymentAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.accountant = make_user(role="accountant")
        self.policy = make_policy()
        self.client.force_authenticate(user=self.accountant)

    def test_record_and_complete(self):
        response = self.client.post(
            "/api/payments/",
            {
                "policy": self.policy.pk,
                "amount": "250.00",
                "payment_method": "MPESA",
                "transaction_id": "ws_co_1",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["client"], self.policy.client_id)

        response = self.client.post("/api/payments/complete/", {"transaction_id": "WS_CO_1"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["completed"])

        response = self.client.post("/api/payments/complete/", {"transaction_id": "WS_CO_1"}, format="json")
        self.assertFalse(response.data["completed"])

    def test_claim_settlement_is_refused_over_http(self):
        claim = make_claim(policy=self.policy, status=Claim.Status.APPROVED)
        response = self.client.post(
            "/api/payments/",
            {
                "policy": self.policy.pk,
                "claim": claim.pk,
                "amount": "500.00",
                "payment_method": "BANK_TRANSFER",
                "payment_type": "CLAIM_SETTLEMENT",
                "status": "COMPLETED",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("payment_type", response.data)
        self.assertFalse(Payment.objects.exists())

    def test_claim_field_is_ignored_on_create(self):
        claim = make_claim(policy=self.policy, status=Claim.Status.APPROVED)
        response = self.client.post(
            "/api/payments/",
            {
                "policy": self.policy.pk,
                "claim": claim.pk,
                "amount": "100.00",
                "payment_method": "CASH",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertIsNone(response.data["claim"])
        claim.refresh_from_db()
        self.assertEqual(claim.paid_amount, Decimal("0.00"))

    def test_search_by_amount(self):
        for amount in ("50.00", "150.00", "500.00"):
            Payment.objects.create(
                client=self.policy.client,
                policy=self.policy,
                amount=Decimal(amount),
                payment_method=Payment.Method.CASH,
            )
        response = self.client.get("/api/payments/search/", {"min_amount": "100", "max_amount": "200"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row["amount"] for row in response.data], ["150.00"])

    def test_search_rejects_inverted_amounts(self):
        response = self.client.get("/api/payments/search/", {"min_amount": "200", "max_amount": "100"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_summary_endpoint(self):
        response = self.client.get(f"/api/payments/summary/{self.policy.client_id}/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 0)

    def test_agent_cannot_complete(self):
        self.client.force_authenticate(user=make_user(role="agent"))
        response = self.client.post("/api/payments/complete/", {"transaction_id": "X"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
