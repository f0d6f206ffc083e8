from datetime import date, datetime, timezone as dt_timezone
from decimal import Decimal
import random

from django.test import SimpleTestCase

from insurance.calculations import (
    compute_total_premium,
    installment_schedule,
    outstanding_balance,
    payment_progress,
)
from insurance.transforms import generate_claim_number, prepare_policy_fields


class PremiumPipelineTests(SimpleTestCase):
    def test_adjustments_apply_in_order(self):
        total = compute_total_premium(
            Decimal("1000"),
            discounts=[{"amount": "100"}],
            loadings=[{"amount": "50"}],
            taxes=[{"rate": "10"}],
            fees=[{"amount": "20"}],
        )
        self.assertEqual(total, Decimal("1065.00"))

    def test_rate_taxes_compound_on_running_total(self):
        total = compute_total_premium(
            Decimal("100"), taxes=[{"rate": "10"}, {"rate": "10"}]
        )
        self.assertEqual(total, Decimal("121.00"))

    def test_discount_cannot_push_total_below_zero(self):
        total = compute_total_premium(
            Decimal("100"), discounts=[{"amount": "500"}], fees=[{"amount": "5"}]
        )
        self.assertEqual(total, Decimal("5.00"))

    def test_missing_amounts_count_as_zero(self):
        total = compute_total_premium(Decimal("250"), loadings=[{"name": "young driver"}])
        self.assertEqual(total, Decimal("250.00"))

    def test_fixed_tax_amount(self):
        total = compute_total_premium(Decimal("1000"), taxes=[{"amount": "45.50"}])
        self.assertEqual(total, Decimal("1045.50"))


class BalanceTests(SimpleTestCase):
    def test_outstanding_never_negative(self):
        self.assertEqual(outstanding_balance(Decimal("1000"), Decimal("1500")), Decimal("0.00"))
        self.assertEqual(outstanding_balance(Decimal("1000"), Decimal("250")), Decimal("750.00"))

    def test_progress_is_capped(self):
        self.assertEqual(payment_progress(Decimal("1000"), Decimal("2000")), Decimal("100.00"))
        self.assertEqual(payment_progress(Decimal("1000"), Decimal("333")), Decimal("33.30"))

    def test_installment_schedule_sums_exactly(self):
        schedule = installment_schedule(
            effective_premium=Decimal("1000"),
            down_payment=Decimal("0"),
            total_installments=3,
            first_due_date=date(2026, 1, 31),
            frequency="MONTHLY",
        )
        self.assertEqual([item["amount"] for item in schedule], [Decimal("333.33"), Decimal("333.33"), Decimal("333.34")])
        self.assertEqual(schedule[1]["due_date"], date(2026, 2, 28))
        self.assertEqual(sum(item["amount"] for item in schedule), Decimal("1000.00"))


class TransformTests(SimpleTestCase):
    def test_claim_number_shape(self):
        now = datetime(2026, 5, 4, 10, 0, 0, 123000, tzinfo=dt_timezone.utc)
        number = generate_claim_number(now, random.Random(1))
        millis = str(int(now.timestamp() * 1000))
        self.assertTrue(number.startswith("CLM-" + millis[-6:]))
        self.assertEqual(len(number), len("CLM-") + 10)

    def test_pending_installments_not_clamped(self):
        fields = prepare_policy_fields({"total_installments": 4, "paid_installments": 6})
        self.assertEqual(fields["pending_installments"], -2)
