from django.db.models import Q

from commissions.models import Commission


def list_commissions(*, status=None, intermediary_id=None, period=None):
    filters = Q()
    if status:
        filters &= Q(status=str(status).strip().upper())
    if intermediary_id:
        filters &= Q(intermediary_id=intermediary_id)
    if period:
        filters &= Q(period=str(period).strip())
    return Commission.objects.filter(filters).select_related("intermediary", "product", "policy")
