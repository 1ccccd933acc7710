from django.http import Http404
from rest_framework import permissions, serializers, status, viewsets
from rest_framework.response import Response
from rest_framework.views import APIView

from .filters import CarFilter, ServiceFilter, StayFilter
from .models import Car, Experience, Service, Stay
from .serializers import CarSerializer, ExperienceSerializer, ServiceSerializer, StaySerializer

DEFAULT_LIMIT = 10
MAX_LIMIT = 100
HOMEPAGE_LIMIT = 6


def _window_param(request, name: str, default: int) -> int:
    raw = request.query_params.get(name)
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except ValueError:
        raise serializers.ValidationError({name: "Must be an integer."})
    if value < 0:
        raise serializers.ValidationError({name: "Must not be negative."})
    return value


class ListingViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Public read-only listing endpoints.

    Collections are windowed with ``limit``/``offset`` query params (newest
    first) and wrapped under ``collection_key``; single items are wrapped under
    ``item_key``.
    """

    permission_classes = [permissions.AllowAny]
    collection_key = ""
    item_key = ""
    not_found_message = "Listing not found"

    def get_queryset(self):
        return self.queryset.select_related("host").order_by("-created_at", "-id")

    def list(self, request, *args, **kwargs):
        limit = min(_window_param(request, "limit", DEFAULT_LIMIT), MAX_LIMIT)
        offset = _window_param(request, "offset", 0)
        queryset = self.filter_queryset(self.get_queryset())[offset:offset + limit]
        serializer = self.get_serializer(queryset, many=True)
        return Response({self.collection_key: serializer.data})

    def retrieve(self, request, *args, **kwargs):
        try:
            instance = self.get_object()
        except Http404:
            return Response({"error": self.not_found_message}, status=status.HTTP_404_NOT_FOUND)
        serializer = self.get_serializer(instance)
        return Response({self.item_key: serializer.data})


class CarViewSet(ListingViewSet):
    queryset = Car.objects.all()
    serializer_class = CarSerializer
    filterset_class = CarFilter
    collection_key = "cars"
    item_key = "car"
    not_found_message = "Car not found"


class StayViewSet(ListingViewSet):
    queryset = Stay.objects.all()
    serializer_class = StaySerializer
    filterset_class = StayFilter
    collection_key = "stays"
    item_key = "stay"
    not_found_message = "Stay not found"


class ServiceViewSet(ListingViewSet):
    queryset = Service.objects.all()
    serializer_class = ServiceSerializer
    filterset_class = ServiceFilter
    collection_key = "services"
    item_key = "service"
    not_found_message = "Service not found"


class HomepageListingsView(APIView):
    """Newest cars, experiences and services for the landing page."""

    permission_classes = [permissions.AllowAny]

    def get(self, request, *args, **kwargs):
        cars = Car.objects.select_related("host").order_by("-created_at", "-id")[:HOMEPAGE_LIMIT]
        experiences = (
            Experience.objects.select_related("host", "car", "car__host")
            .prefetch_related("services__host")
            .order_by("-created_at", "-id")[:HOMEPAGE_LIMIT]
        )
        services = Service.objects.select_related("host").order_by("-created_at", "-id")[:HOMEPAGE_LIMIT]
        return Response(
            {
                "cars": CarSerializer(cars, many=True).data,
                "experiences": ExperienceSerializer(experiences, many=True).data,
                "services": ServiceSerializer(services, many=True).data,
            }
        )
