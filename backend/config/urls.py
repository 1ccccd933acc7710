from django.contrib import admin
from django.urls import include, path
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView

from accounts.api import (
    DriverLicenseVerificationView,
    LoginView,
    ProfileView,
    RegisterView,
    SessionView,
    VerifyEmailView,
)
from bookings.api import BookingListCreateView
from listings.api import CarViewSet, HomepageListingsView, ServiceViewSet, StayViewSet
from notifications.api import SendEmailView
from payments.api import PaymentInitializeView, PaymentProcessView, PaymentVerifyView

router = DefaultRouter()
router.register(r"cars", CarViewSet, basename="car")
router.register(r"stays", StayViewSet, basename="stay")
router.register(r"services", ServiceViewSet, basename="service")

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/auth/register/", RegisterView.as_view(), name="auth-register"),
    path("api/auth/login/", LoginView.as_view(), name="auth-login"),
    path("api/auth/refresh/", TokenRefreshView.as_view(), name="auth-refresh"),
    path("api/auth/session/", SessionView.as_view(), name="auth-session"),
    path("api/auth/profile/", ProfileView.as_view(), name="auth-profile"),
    path(
        "api/auth/verify-email/<str:token>/",
        VerifyEmailView.as_view(),
        name="auth-verify-email",
    ),
    path(
        "api/profile/verification/",
        DriverLicenseVerificationView.as_view(),
        name="profile-verification",
    ),
    path("api/listings/homepage/", HomepageListingsView.as_view(), name="listings-homepage"),
    path("api/bookings/", BookingListCreateView.as_view(), name="bookings"),
    path(
        "api/payments/initialize/",
        PaymentInitializeView.as_view(),
        name="payments-initialize",
    ),
    path("api/payments/process/", PaymentProcessView.as_view(), name="payments-process"),
    path("api/payments/verify/", PaymentVerifyView.as_view(), name="payments-verify"),
    path("api/emails/send/", SendEmailView.as_view(), name="emails-send"),
    path("api/", include(router.urls)),
]
