from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal

from django.db.models import Count, Q, Sum
from django.utils import timezone

from insurance.calculations import ZERO, quantize_money
from insurance.models import Quote

RANGE_CHOICES = ("daily", "weekly", "monthly")


def resolve_date_range(
    *,
    range_name: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    now: datetime | None = None,
) -> tuple[datetime, datetime] | None:
    """Translate a named range or explicit dates into an aware datetime window."""

    today = timezone.localdate(now) if now else timezone.localdate()
    if range_name == "daily":
        start, end = today, today
    elif range_name == "weekly":
        start = today - timedelta(days=today.weekday())
        end = start + timedelta(days=6)
    elif range_name == "monthly":
        start = today.replace(day=1)
        next_month = (start + timedelta(days=32)).replace(day=1)
        end = next_month - timedelta(days=1)
    elif start_date and end_date:
        start, end = start_date, end_date
    else:
        return None

    tz = timezone.get_current_timezone()
    return (
        timezone.make_aware(datetime.combine(start, time.min), tz),
        timezone.make_aware(datetime.combine(end, time.max), tz),
    )


def quotes_created_between(start: datetime, end: datetime) -> Q:
    return Q(created_at__gte=start, created_at__lte=end)


def pending_quotes() -> Q:
    return Q(status=Quote.Status.PENDING)


def stale_pending_quotes(now: datetime | None = None) -> Q:
    return pending_quotes() & Q(valid_to__lt=now or timezone.now())


def quotes_visible_to(user) -> Q:
    if getattr(user, "role", "") == "client" and not user.is_superuser:
        return Q(client__user=user)
    return Q()


def list_quotes(*, user, window=None, status: str | None = None, client_id: int | None = None):
    filters = quotes_visible_to(user)
    if window is not None:
        filters &= quotes_created_between(*window)
    if status:
        filters &= Q(status=str(status).strip().upper())
    if client_id:
        filters &= Q(client_id=client_id)
    return (
        Quote.objects.filter(filters)
        .select_related("client", "product", "intermediary")
        .order_by("-created_at", "-id")
    )


def _percent(part: int, whole: int) -> Decimal:
    if not whole:
        return ZERO
    return quantize_money(Decimal(part) * Decimal("100") / Decimal(whole))


def quote_statistics(queryset) -> dict:
    totals = queryset.aggregate(
        total_quotes=Count("id"),
        total_premium=Sum("total_premium"),
        converted=Count("id", filter=Q(status=Quote.Status.CONVERTED)),
    )
    total_quotes = totals["total_quotes"] or 0
    total_premium = quantize_money(totals["total_premium"] or ZERO)
    converted = totals["converted"] or 0

    by_product = []
    rows = (
        queryset.values("product_id", "product__name")
        .annotate(
            count=Count("id"),
            total_premium=Sum("total_premium"),
            converted=Count("id", filter=Q(status=Quote.Status.CONVERTED)),
        )
        .order_by("product__name")
    )
    for row in rows:
        by_product.append(
            {
                "product_id": row["product_id"],
                "name": row["product__name"] or "Unknown",
                "count": row["count"],
                "total_premium": quantize_money(row["total_premium"] or ZERO),
                "conversion_rate": _percent(row["converted"], row["count"]),
            }
        )

    return {
        "total_quotes": total_quotes,
        "total_premium": total_premium,
        "converted_quotes": converted,
        "conversion_rate": _percent(converted, total_quotes),
        "average_premium": (
            quantize_money(total_premium / total_quotes) if total_quotes else ZERO
        ),
        "by_product": by_product,
    }
