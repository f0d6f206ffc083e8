from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import HasResourceRole
from ledger.models import LedgerEntry
from ledger.serializers import LedgerEntrySerializer
from ledger.services import verify_chain


class LedgerEntryListAPIView(APIView):
    permission_classes = [HasResourceRole]
    resource_key = "ledger"

    def get(self, request):
        try:
            limit = int(request.query_params.get("limit", "200"))
        except ValueError:
            limit = 200
        limit = max(1, min(limit, 1000))

        entries = LedgerEntry.objects.all()
        chain_id = (request.query_params.get("chain_id") or "").strip()
        if chain_id:
            entries = entries.filter(chain_id=chain_id)
        resource_label = (request.query_params.get("resource") or "").strip()
        if resource_label:
            entries = entries.filter(resource_label=resource_label)
        resource_pk = (request.query_params.get("resource_pk") or "").strip()
        if resource_pk:
            entries = entries.filter(resource_pk=resource_pk)

        entries = entries.order_by("-occurred_at", "-id")[:limit]
        return Response(LedgerEntrySerializer(entries, many=True).data)


class LedgerChainVerifyAPIView(APIView):
    permission_classes = [HasResourceRole]
    resource_key = "ledger"

    def get(self, request, chain_id: str):
        broken = verify_chain(chain_id)
        if broken is None:
            return Response({"chain_id": chain_id, "intact": True})
        return Response(
            {"chain_id": chain_id, "intact": False, "broken_entry_id": broken.pk}
        )
