from __future__ import annotations

from django.db.models import Q

from insurance.models import Claim

OPEN_STATUSES = (
    Claim.Status.DRAFT,
    Claim.Status.SUBMITTED,
    Claim.Status.UNDER_REVIEW,
    Claim.Status.APPROVED,
)


def open_claims() -> Q:
    return Q(status__in=OPEN_STATUSES)


def claims_for_policy(policy_id: int) -> Q:
    return Q(policy_id=policy_id)


def claims_assigned_to(user) -> Q:
    return Q(assigned_to=user)


def claims_visible_to(user) -> Q:
    if getattr(user, "role", "") == "client" and not user.is_superuser:
        return Q(client__user=user)
    return Q()


def list_claims(
    *,
    user,
    status: str | None = None,
    policy_id: int | None = None,
    only_open: bool = False,
    assigned_to_me: bool = False,
):
    filters = claims_visible_to(user)
    if status:
        filters &= Q(status=str(status).strip().upper())
    if policy_id:
        filters &= claims_for_policy(policy_id)
    if only_open:
        filters &= open_claims()
    if assigned_to_me:
        filters &= claims_assigned_to(user)
    return (
        Claim.objects.filter(filters)
        .select_related("policy", "client", "assigned_to")
        .order_by("-date_reported", "-id")
    )
