# payables/api/urls.py

from django.urls import path

from payables.api.views import (
    PayableDetailView,
    PayableListView,
    PayablePaymentView,
    PayableRefreshStatusView,
    PayableSummaryView,
)

urlpatterns = [
    path("", PayableListView.as_view(), name="payable-list"),
    path("summary/", PayableSummaryView.as_view(), name="payable-summary"),
    path("refresh-status/", PayableRefreshStatusView.as_view(), name="payable-refresh-status"),
    path("<uuid:payable_id>/", PayableDetailView.as_view(), name="payable-detail"),
    path("<uuid:payable_id>/payments/", PayablePaymentView.as_view(), name="payable-payment"),
]
