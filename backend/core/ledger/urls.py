from django.urls import path

from ledger.views import LedgerChainVerifyAPIView, LedgerEntryListAPIView

urlpatterns = [
    path("", LedgerEntryListAPIView.as_view(), name="ledger-list"),
    path("verify/<str:chain_id>/", LedgerChainVerifyAPIView.as_view(), name="ledger-verify"),
]
