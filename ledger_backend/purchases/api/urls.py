# purchases/api/urls.py

from django.urls import path

from purchases.api.views import (
    CancelPurchaseOrderView,
    PurchaseOrderDetailView,
    PurchaseOrderItemCreateView,
    PurchaseOrderItemDeleteView,
    PurchaseOrderListCreateView,
    ReceiveGoodsView,
    SendPurchaseOrderView,
)

urlpatterns = [
    path("orders/", PurchaseOrderListCreateView.as_view(), name="purchase-order-list-create"),
    path("orders/<uuid:order_id>/", PurchaseOrderDetailView.as_view(), name="purchase-order-detail"),
    path("orders/<uuid:order_id>/items/", PurchaseOrderItemCreateView.as_view(), name="purchase-order-item-create"),
    path(
        "orders/<uuid:order_id>/items/<uuid:item_id>/",
        PurchaseOrderItemDeleteView.as_view(),
        name="purchase-order-item-delete",
    ),
    path("orders/<uuid:order_id>/send/", SendPurchaseOrderView.as_view(), name="purchase-order-send"),
    path("orders/<uuid:order_id>/cancel/", CancelPurchaseOrderView.as_view(), name="purchase-order-cancel"),
    path("orders/<uuid:order_id>/receive/", ReceiveGoodsView.as_view(), name="purchase-order-receive"),
]
