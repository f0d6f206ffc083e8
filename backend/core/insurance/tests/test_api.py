from decimal import Decimal

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from insurance.models import Claim, Policy, Quote
from insurance.tests.factories import (
    make_claim,
    make_client,
    make_policy,
    make_product,
    make_quote,
    make_user,
)


class QuoteAPITests(TestCase):
    def setUp(self):
        self.agent = make_user(role="agent")
        self.client = APIClient()
        self.client.force_authenticate(user=self.agent)

    def test_create_quote_applies_premium_pipeline(self):
        response = self.client.post(
            "/api/quotes/",
            {
                "client": make_client().pk,
                "product": make_product().pk,
                "sum_insured": "500000.00",
                "base_premium": "1000.00",
                "discounts": [{"name": "No claims", "amount": "100.00"}],
                "taxes": [{"name": "VAT", "rate": "16"}],
                "fees": [{"name": "Stamp duty", "amount": "21.00"}],
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["total_premium"], "1065.00")
        self.assertEqual(response.data["status"], Quote.Status.DRAFT)
        self.assertTrue(response.data["quote_number"].startswith("QTE-"))

    def test_adjustment_without_amount_or_rate_is_rejected(self):
        response = self.client.post(
            "/api/quotes/",
            {
                "client": make_client().pk,
                "product": make_product().pk,
                "sum_insured": "1000.00",
                "base_premium": "100.00",
                "fees": [{"name": "Empty"}],
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_convert_returns_policy(self):
        quote = make_quote(total_premium=Decimal("1065.00"))
        response = self.client.post(f"/api/quotes/{quote.pk}/convert/", {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["policy_number"], f"POL-{quote.quote_number}")
        self.assertEqual(response.data["annual_premium"], "1065.00")
        quote.refresh_from_db()
        self.assertEqual(quote.status, Quote.Status.CONVERTED)

    def test_converting_draft_quote_conflicts(self):
        quote = make_quote(status=Quote.Status.DRAFT)
        response = self.client.post(f"/api/quotes/{quote.pk}/convert/", {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "invalid_state")
        self.assertFalse(Policy.objects.exists())

    def test_decline_requires_reason(self):
        quote = make_quote()
        response = self.client.post(f"/api/quotes/{quote.pk}/decline/", {"reason": " "}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        quote.refresh_from_db()
        self.assertEqual(quote.status, Quote.Status.PENDING)

    def test_stats(self):
        product = make_product(name="Home")
        make_quote(product=product, total_premium=Decimal("100.00"))
        make_quote(product=product, total_premium=Decimal("300.00"), status=Quote.Status.CONVERTED)
        response = self.client.get("/api/quotes/stats/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total_quotes"], 2)
        self.assertEqual(response.data["total_premium"], Decimal("400.00"))
        self.assertEqual(response.data["conversion_rate"], Decimal("50.00"))
        self.assertEqual(response.data["average_premium"], Decimal("200.00"))
        self.assertEqual(response.data["by_product"][0]["name"], "Home")

    def test_stats_rejects_half_open_range(self):
        response = self.client.get("/api/quotes/stats/", {"start_date": "2025-01-01"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class ClaimAPITests(TestCase):
    def setUp(self):
        self.holder = make_user(role="client")
        self.policy = make_policy(client=make_client(user=self.holder))
        self.officer = make_user(role="claims")
        self.client = APIClient()

    def test_client_files_and_submits_claim(self):
        self.client.force_authenticate(user=self.holder)
        response = self.client.post(
            "/api/claims/",
            {
                "policy": self.policy.pk,
                "date_of_loss": str(self.policy.policy_start_date),
                "description": "Windscreen cracked.",
                "estimated_amount": "250.00",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["client"], self.policy.client_id)
        self.assertEqual(response.data["status"], Claim.Status.DRAFT)

        response = self.client.post(f"/api/claims/{response.data['id']}/submit/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], Claim.Status.SUBMITTED)

    def test_client_cannot_claim_on_someone_elses_policy(self):
        self.client.force_authenticate(user=self.holder)
        other = make_policy()
        response = self.client.post(
            "/api/claims/",
            {
                "policy": other.pk,
                "date_of_loss": str(other.policy_start_date),
                "description": "Not mine.",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_client_cannot_approve(self):
        claim = make_claim(policy=self.policy, status=Claim.Status.SUBMITTED)
        self.client.force_authenticate(user=self.holder)
        response = self.client.post(f"/api/claims/{claim.pk}/approve/", {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_client_sees_only_own_claims(self):
        mine = make_claim(policy=self.policy)
        make_claim()
        self.client.force_authenticate(user=self.holder)
        response = self.client.get("/api/claims/")
        self.assertEqual([row["id"] for row in response.data], [mine.pk])

    def test_officer_approves_and_pays(self):
        claim = make_claim(policy=self.policy, status=Claim.Status.SUBMITTED)
        self.client.force_authenticate(user=self.officer)

        response = self.client.post(
            f"/api/claims/{claim.pk}/approve/", {"amount": "500.00"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["approved_amount"], "500.00")

        response = self.client.post(
            f"/api/claims/{claim.pk}/payments/", {"amount": "500.00"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["claim"]["status"], Claim.Status.PAID)
        self.assertEqual(response.data["payment"]["payment_type"], "CLAIM_SETTLEMENT")

    def test_approving_draft_conflicts(self):
        claim = make_claim(policy=self.policy)
        self.client.force_authenticate(user=self.officer)
        response = self.client.post(f"/api/claims/{claim.pk}/approve/", {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["current_status"], Claim.Status.DRAFT)

    def test_status_endpoint_rejects_direct_paid(self):
        claim = make_claim(policy=self.policy, status=Claim.Status.APPROVED, approved_amount=Decimal("10"))
        self.client.force_authenticate(user=self.officer)
        response = self.client.post(f"/api/claims/{claim.pk}/status/", {"status": "PAID"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)


class PolicyAPITests(TestCase):
    def setUp(self):
        self.agent = make_user(role="agent")
        self.client = APIClient()
        self.client.force_authenticate(user=self.agent)
        self.policy = make_policy()

    def test_cancel(self):
        response = self.client.post(
            f"/api/policies/{self.policy.pk}/cancel/", {"reason": "Customer request"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], Policy.Status.CANCELLED)

        response = self.client.post(
            f"/api/policies/{self.policy.pk}/transition/", {"status": "ACTIVE"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_balance(self):
        response = self.client.get(f"/api/policies/{self.policy.pk}/balance/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["outstanding_balance"], Decimal("1200.00"))

    def test_missing_policy_is_404(self):
        response = self.client.get("/api/policies/999999/")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_anonymous_is_rejected(self):
        self.client.force_authenticate(user=None)
        response = self.client.get("/api/policies/")
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))


class ProductAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_only_admin_creates_products(self):
        self.client.force_authenticate(user=make_user(role="agent"))
        payload = {"name": "Travel", "code": "trv1", "category": "TRAVEL", "commission_rate": "5.00"}
        response = self.client.post("/api/products/", payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=make_user(role="admin"))
        response = self.client.post("/api/products/", payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["code"], "TRV1")
