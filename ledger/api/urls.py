from django.urls import path

from ledger.api.views import (
    LedgerBalanceAPIView,
    LedgerInstantiateAPIView,
    LedgerOwnerAPIView,
    LedgerSendFeeAPIView,
    LedgerTransferAPIView,
    LedgerWithdrawAPIView,
)

urlpatterns = [
    path(
        "instantiate/",
        LedgerInstantiateAPIView.as_view(),
        name="ledger-instantiate",
    ),
    path("transfer/", LedgerTransferAPIView.as_view(), name="ledger-transfer"),
    path("withdraw/", LedgerWithdrawAPIView.as_view(), name="ledger-withdraw"),
    path("owner/", LedgerOwnerAPIView.as_view(), name="ledger-owner"),
    path("send-fee/", LedgerSendFeeAPIView.as_view(), name="ledger-send-fee"),
    path(
        "balances/<str:account>/",
        LedgerBalanceAPIView.as_view(),
        name="ledger-balance",
    ),
]
