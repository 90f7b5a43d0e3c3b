# inventory/api/urls.py

from django.urls import path

from inventory.api.views import (
    ExpiringBatchesView,
    InboundView,
    MovementListView,
    OutboundView,
    StockView,
    TransferView,
)

urlpatterns = [
    path("inbound/", InboundView.as_view(), name="inventory-inbound"),
    path("outbound/", OutboundView.as_view(), name="inventory-outbound"),
    path("transfers/", TransferView.as_view(), name="inventory-transfer"),
    path("stock/", StockView.as_view(), name="inventory-stock"),
    path("expiring/", ExpiringBatchesView.as_view(), name="inventory-expiring"),
    path("movements/", MovementListView.as_view(), name="inventory-movements"),
]
