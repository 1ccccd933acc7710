import logging

from rest_framework import generics, permissions, status
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response

from bookings.models import Booking
from bookings.serializers import BookingCreateSerializer, BookingSerializer
from notifications.dispatcher import NotifierMixin

logger = logging.getLogger(__name__)


class BookingListCreateView(NotifierMixin, generics.GenericAPIView):
    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return (
            Booking.objects.filter(user=self.request.user)
            .select_related("car", "stay", "service", "experience")
            .order_by("-created_at", "-id")
        )

    def get(self, request, *args, **kwargs):
        serializer = BookingSerializer(self.get_queryset(), many=True)
        return Response({"bookings": serializer.data})

    def post(self, request, *args, **kwargs):
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        if (
            serializer.validated_data["booking_type"] == Booking.CAR
            and not request.user.driver_license_verified
        ):
            raise PermissionDenied("A verified driver's license is required to book a car.")

        booking = serializer.save(user=request.user)
        logger.info(
            "Created %s booking %s for user %s", booking.booking_type, booking.id, request.user.id
        )

        notifier = self.get_notifier()
        notifier.booking_confirmation(booking)
        notifier.host_booking_notification(booking)

        return Response(
            {"booking": BookingSerializer(booking).data},
            status=status.HTTP_201_CREATED,
        )
