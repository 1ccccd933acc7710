from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView

from notifications.dispatcher import NotifierMixin

from .serializers import (
    DriverLicenseSerializer,
    EmailTokenObtainPairSerializer,
    ProfileSerializer,
    ProfileUpdateSerializer,
    RegisterSerializer,
    UserSerializer,
)
from .services.email_verification import (
    build_email_verification_url,
    resolve_email_verification_token,
)

User = get_user_model()


class RegisterView(NotifierMixin, APIView):
    """Create a new user account and issue an initial JWT pair."""

    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        notifier = self.get_notifier()
        notifier.welcome(user)
        notifier.verification(user, build_email_verification_url(user))

        refresh = RefreshToken.for_user(user)
        return Response(
            {
                "user": UserSerializer(user).data,
                "access": str(refresh.access_token),
                "refresh": str(refresh),
            },
            status=status.HTTP_201_CREATED,
        )


class LoginView(TokenObtainPairView):
    """Authenticate an existing user via email + password."""

    serializer_class = EmailTokenObtainPairSerializer


class VerifyEmailView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, token, *args, **kwargs):
        user = resolve_email_verification_token(token)
        if user is None:
            return Response(
                {"error": "Invalid or expired verification link."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        user.mark_email_verified()
        return Response({"email_verified": True})


class SessionView(APIView):
    """Report the signed-in user and profile, or nulls for anonymous callers."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):
        if not request.user.is_authenticated:
            return Response({"user": None, "profile": None})
        return Response(
            {
                "user": UserSerializer(request.user).data,
                "profile": ProfileSerializer(request.user).data,
            }
        )


class ProfileView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        return Response({"profile": ProfileSerializer(request.user).data})

    def patch(self, request, *args, **kwargs):
        serializer = ProfileUpdateSerializer(
            instance=request.user, data=request.data, partial=True
        )
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response({"profile": ProfileSerializer(user).data})

    def put(self, request, *args, **kwargs):
        return self.patch(request, *args, **kwargs)


class DriverLicenseVerificationView(APIView):
    """Store licence images for manual review; a fresh upload clears any earlier approval."""

    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = DriverLicenseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        request.user.submit_driver_license(
            front=serializer.validated_data["driver_license_front"],
            back=serializer.validated_data["driver_license_back"],
        )
        return Response(
            {
                "success": True,
                "message": "Driver's license submitted successfully for verification",
            }
        )
