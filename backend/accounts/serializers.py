from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """Expose the public fields for the custom user model."""

    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "display_name",
            "full_name",
            "phone",
            "role",
        ]
        read_only_fields = ["id", "email", "role"]


class ProfileSerializer(serializers.ModelSerializer):
    """Full profile, including the verification flags used to gate bookings."""

    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "display_name",
            "full_name",
            "phone",
            "role",
            "email_verified",
            "driver_license_front",
            "driver_license_back",
            "driver_license_verified",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class RegisterSerializer(serializers.ModelSerializer):
    """Validate and create a user during registration."""

    password = serializers.CharField(write_only=True, min_length=8)
    role = serializers.ChoiceField(choices=User.ROLES, default=User.ROLE_USER)

    class Meta:
        model = User
        fields = [
            "email",
            "password",
            "display_name",
            "phone",
            "role",
        ]

    def validate_email(self, value: str) -> str:
        email = value.lower()
        if User.objects.filter(email__iexact=email).exists():
            raise serializers.ValidationError("A user with this email already exists.")
        return email

    def create(self, validated_data):
        """Persist the user record with a normalized email and display name."""
        email = validated_data.pop("email").lower()
        user = User.objects.create_user(
            username=email,
            email=email,
            password=validated_data.pop("password"),
            **validated_data,
        )
        if not user.display_name:
            user.display_name = email.split("@", 1)[0]
            user.save(update_fields=["display_name"])
        return user


class EmailTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Allow SimpleJWT to accept an email field for authentication."""

    username_field = User.USERNAME_FIELD

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["email"] = serializers.EmailField(required=False)
        self.fields[self.username_field].required = False

    def validate(self, attrs):
        """Proxy email through to SimpleJWT while returning user details."""
        email = attrs.get("email")
        if email and not attrs.get("username"):
            attrs["username"] = email.lower()
        attrs.pop("email", None)
        if not attrs.get("username"):
            raise serializers.ValidationError({"email": "This field is required."})
        data = super().validate(attrs)
        data["user"] = UserSerializer(self.user).data
        return data


class ProfileUpdateSerializer(serializers.ModelSerializer):
    """Update the mutable fields on the authenticated user's profile."""

    class Meta:
        model = User
        fields = ["display_name", "phone", "role"]

    def validate(self, attrs):
        role = attrs.get("role")
        if role == User.ROLE_HOST and self.instance.role != User.ROLE_HOST:
            display_name = attrs.get("display_name", self.instance.display_name)
            phone = attrs.get("phone", self.instance.phone)
            if not (display_name or "").strip() or not (phone or "").strip():
                raise serializers.ValidationError(
                    {"role": "A full name and phone number are required to become a host."}
                )
        return attrs


class DriverLicenseSerializer(serializers.Serializer):
    driver_license_front = serializers.URLField(
        max_length=500, required=False, allow_blank=True
    )
    driver_license_back = serializers.URLField(
        max_length=500, required=False, allow_blank=True
    )

    def validate(self, attrs):
        if not attrs.get("driver_license_front") or not attrs.get("driver_license_back"):
            raise serializers.ValidationError(
                "Both front and back images of driver's license are required"
            )
        return attrs
