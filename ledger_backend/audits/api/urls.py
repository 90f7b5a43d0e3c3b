# audits/api/urls.py

from django.urls import path

from audits.api.views import (
    AuditCancelView,
    AuditCloseView,
    AuditDetailView,
    AuditItemCountView,
    AuditListCreateView,
)

urlpatterns = [
    path("", AuditListCreateView.as_view(), name="audit-list-create"),
    path("<uuid:audit_id>/", AuditDetailView.as_view(), name="audit-detail"),
    path("<uuid:audit_id>/items/<uuid:item_id>/", AuditItemCountView.as_view(), name="audit-item-count"),
    path("<uuid:audit_id>/close/", AuditCloseView.as_view(), name="audit-close"),
    path("<uuid:audit_id>/cancel/", AuditCancelView.as_view(), name="audit-cancel"),
]
