from __future__ import annotations

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core import signing

User = get_user_model()

_SALT = "accounts.email-verification"


def make_email_verification_token(user) -> str:
    return signing.dumps({"uid": user.pk, "email": user.email}, salt=_SALT)


def build_email_verification_url(user) -> str:
    token = make_email_verification_token(user)
    return f"{settings.SITE_URL.rstrip('/')}/api/auth/verify-email/{token}/"


def resolve_email_verification_token(token: str):
    """Return the user a verification token was issued for, or None when invalid or expired."""

    try:
        payload = signing.loads(
            token,
            salt=_SALT,
            max_age=settings.EMAIL_VERIFICATION_MAX_AGE,
        )
    except signing.BadSignature:
        return None

    user = User.objects.filter(pk=payload.get("uid")).first()
    if user is None or user.email.lower() != str(payload.get("email", "")).lower():
        return None
    return user
