# inventory/api/filters.py

import django_filters
from django.db.models import Q

from inventory.models import Movement


class MovementFilter(django_filters.FilterSet):
    """
    Movement history filters.

    warehouse matches either side of the movement (origin or destination).
    search is a free-text match on reference id and notes.
    """

    type = django_filters.ChoiceFilter(
        field_name="movement_type", choices=Movement.MovementType.choices
    )
    direction = django_filters.ChoiceFilter(choices=Movement.Direction.choices)
    product = django_filters.UUIDFilter(field_name="product_id")
    batch = django_filters.UUIDFilter(field_name="batch_id")
    warehouse = django_filters.UUIDFilter(method="filter_warehouse")
    user = django_filters.NumberFilter(field_name="performed_by_id")
    reference_type = django_filters.ChoiceFilter(choices=Movement.ReferenceType.choices)
    date_from = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="gte")
    date_to = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="lte")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Movement
        fields = []

    def filter_warehouse(self, queryset, name, value):
        return queryset.filter(
            Q(origin_warehouse_id=value) | Q(destination_warehouse_id=value)
        )

    def filter_search(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(reference_id__icontains=value) | Q(notes__icontains=value)
        )
