import django_filters

from .models import Car, Service, Stay


class CarFilter(django_filters.FilterSet):
    host_id = django_filters.NumberFilter(field_name="host_id")

    class Meta:
        model = Car
        fields = ["host_id"]


class StayFilter(django_filters.FilterSet):
    host_id = django_filters.NumberFilter(field_name="host_id")
    state = django_filters.CharFilter(field_name="state", lookup_expr="iexact")

    class Meta:
        model = Stay
        fields = ["host_id", "state"]


class ServiceFilter(django_filters.FilterSet):
    host_id = django_filters.NumberFilter(field_name="host_id")

    class Meta:
        model = Service
        fields = ["host_id"]
