"""FilterSet definitions for accommodation listing."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Accommodation


class AccommodationFilterSet(django_filters.FilterSet):
    city = django_filters.CharFilter(field_name="city", lookup_expr="icontains")
    status = django_filters.ChoiceFilter(choices=Accommodation.Status.choices)
    price_min = django_filters.NumberFilter(field_name="base_price", lookup_expr="gte")
    price_max = django_filters.NumberFilter(field_name="base_price", lookup_expr="lte")
    guests = django_filters.NumberFilter(field_name="max_guests", lookup_expr="gte")

    class Meta:
        model = Accommodation
        fields = ["city", "status"]
