from django.db.models import Q

from clients.models import Client


def client_search(term: str) -> Q:
    term = (term or "").strip()
    if not term:
        return Q()
    return (
        Q(first_name__icontains=term)
        | Q(last_name__icontains=term)
        | Q(email__icontains=term)
        | Q(phone__icontains=term)
        | Q(id_number__icontains=term)
    )


def clients_with_status(status: str) -> Q:
    return Q(status=status)


def clients_visible_to(user) -> Q:
    """Client-role users only ever see their own profile."""

    if getattr(user, "role", "") == "client" and not user.is_superuser:
        return Q(user=user)
    return Q()


def list_clients(*, user, search: str = "", status: str = ""):
    filters = clients_visible_to(user) & client_search(search)
    if status:
        filters &= clients_with_status(status)
    return Client.objects.filter(filters).order_by("last_name", "first_name", "id")
