from __future__ import annotations

from datetime import date

from django.db.models import Q
from django.utils import timezone

from insurance.models import Intermediary, Product


def available_products(on: date | None = None) -> Q:
    on = on or timezone.localdate()
    return (
        Q(status=Product.Status.ACTIVE, effective_date__lte=on)
        & (Q(expiry_date__isnull=True) | Q(expiry_date__gte=on))
    )


def list_products(
    *,
    category: str | None = None,
    status: str | None = None,
    available_only: bool = False,
    search: str | None = None,
):
    qs = Product.objects.all()
    if category:
        qs = qs.filter(category=str(category).strip().upper())
    if status:
        qs = qs.filter(status=str(status).strip().upper())
    if available_only:
        qs = qs.filter(available_products())
    if search:
        search = str(search).strip()
        if search:
            qs = qs.filter(Q(name__icontains=search) | Q(code__icontains=search))
    return qs.order_by("name", "id")


def list_intermediaries(
    *,
    intermediary_type: str | None = None,
    status: str | None = None,
    search: str | None = None,
):
    qs = Intermediary.objects.all()
    if intermediary_type:
        qs = qs.filter(intermediary_type=str(intermediary_type).strip().lower())
    if status:
        qs = qs.filter(status=str(status).strip().lower())
    if search:
        search = str(search).strip()
        if search:
            qs = qs.filter(Q(name__icontains=search) | Q(code__icontains=search))
    return qs.order_by("name", "id")
