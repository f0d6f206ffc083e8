"""Named query builders for policies.

Each ``*_policies`` function returns a ``Q`` so callers can compose them;
``list_policies`` applies the usual API filters.
"""

from __future__ import annotations

from datetime import date, timedelta

from django.db.models import Q
from django.utils import timezone

from insurance.models import Policy


def active_policies(on: date | None = None) -> Q:
    on = on or timezone.localdate()
    return Q(
        status=Policy.Status.ACTIVE,
        policy_start_date__lte=on,
        policy_end_date__gte=on,
    )


def expired_policies(on: date | None = None) -> Q:
    on = on or timezone.localdate()
    return Q(status=Policy.Status.EXPIRED) | Q(
        status=Policy.Status.ACTIVE, policy_end_date__lt=on
    )


def cancelled_policies() -> Q:
    return Q(status=Policy.Status.CANCELLED)


def policies_expiring_within(days: int, on: date | None = None) -> Q:
    on = on or timezone.localdate()
    return Q(
        status=Policy.Status.ACTIVE,
        policy_end_date__gte=on,
        policy_end_date__lte=on + timedelta(days=days),
    )


def policies_for_client(client_id: int) -> Q:
    return Q(client_id=client_id)


def policies_visible_to(user) -> Q:
    if getattr(user, "role", "") == "client" and not user.is_superuser:
        return Q(client__user=user)
    return Q()


def list_policies(
    *,
    user,
    status: str | None = None,
    scope: str | None = None,
    client_id: int | None = None,
    product_id: int | None = None,
    search: str | None = None,
):
    filters = policies_visible_to(user)
    if scope == "active":
        filters &= active_policies()
    elif scope == "expired":
        filters &= expired_policies()
    elif scope == "cancelled":
        filters &= cancelled_policies()
    if status:
        filters &= Q(status=str(status).strip().upper())
    if client_id:
        filters &= policies_for_client(client_id)
    if product_id:
        filters &= Q(product_id=product_id)
    if search:
        search = str(search).strip()
        if search:
            filters &= Q(policy_number__icontains=search) | Q(client__last_name__icontains=search)
    return (
        Policy.objects.filter(filters)
        .select_related("client", "product", "intermediary")
        .order_by("-policy_start_date", "-id")
    )
