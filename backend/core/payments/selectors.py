from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.db.models import Count, Q, Sum

from insurance.calculations import ZERO, quantize_money
from payments.models import Payment


def completed_payments() -> Q:
    return Q(status=Payment.Status.COMPLETED)


def payments_for_client(client_id) -> Q:
    return Q(client_id=client_id)


def payments_visible_to(user) -> Q:
    if getattr(user, "role", "") == "client" and not user.is_superuser:
        return Q(client__user=user)
    return Q()


def search_payments(
    *,
    user,
    client_id=None,
    policy_id=None,
    status: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    min_amount: Decimal | None = None,
    max_amount: Decimal | None = None,
):
    filters = payments_visible_to(user)
    if client_id:
        filters &= payments_for_client(client_id)
    if policy_id:
        filters &= Q(policy_id=policy_id)
    if status:
        filters &= Q(status=str(status).strip().upper())
    if start_date:
        filters &= Q(payment_date__date__gte=start_date)
    if end_date:
        filters &= Q(payment_date__date__lte=end_date)
    if min_amount is not None:
        filters &= Q(amount__gte=min_amount)
    if max_amount is not None:
        filters &= Q(amount__lte=max_amount)
    return Payment.objects.filter(filters).select_related("client", "policy", "claim")


def client_payment_summary(client_id) -> dict:
    """Count, total and average of a client's COMPLETED payments, by method."""

    queryset = Payment.objects.filter(payments_for_client(client_id) & completed_payments())
    totals = queryset.aggregate(count=Count("id"), total=Sum("amount"))
    count = totals["count"] or 0
    total = quantize_money(totals["total"] or ZERO)

    by_method = {
        row["payment_method"]: {
            "count": row["count"],
            "total": quantize_money(row["total"] or ZERO),
        }
        for row in queryset.values("payment_method")
        .annotate(count=Count("id"), total=Sum("amount"))
        .order_by("payment_method")
    }
    return {
        "client_id": int(client_id),
        "count": count,
        "total": total,
        "average": quantize_money(total / count) if count else ZERO,
        "by_method": by_method,
    }
