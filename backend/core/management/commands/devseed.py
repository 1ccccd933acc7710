from decimal import Decimal

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from accounts.models import User
from listings.models import Car, Experience, Service, Stay


SEED_PASSWORD = "Carrrs123!"
SUPERUSER_EMAIL = "admin@carrrs.test"
SUPERUSER_PASSWORD = "AdminCarrrs123!"


class Command(BaseCommand):
    help = "Populate the local development database with sample data."

    def handle(self, *args, **options):
        if not settings.DEBUG:
            raise CommandError("Refusing to seed data while DEBUG is False.")

        with transaction.atomic():
            self.stdout.write(self.style.MIGRATE_HEADING("Creating users"))
            host = self._ensure_user(
                email="host@carrrs.test",
                display_name="Hannah Host",
                phone="0803-000-0100",
                role=User.ROLE_HOST,
            )
            renter = self._ensure_user(
                email="renter@carrrs.test",
                display_name="Remi Renter",
                phone="0803-000-0200",
                role=User.ROLE_USER,
                driver_license_verified=True,
            )
            self._ensure_superuser()

            self.stdout.write(self.style.MIGRATE_HEADING("Creating listings"))
            car, _ = Car.objects.update_or_create(
                host=host,
                title="Toyota Camry 2021",
                defaults={
                    "description": "Clean, chauffeur-optional sedan for city trips.",
                    "location": "Lekki, Lagos",
                    "state": "Lagos",
                    "make": "Toyota",
                    "model": "Camry",
                    "year": 2021,
                    "seats": 5,
                    "price_per_day": Decimal("20000.00"),
                    "features": ["air conditioning", "bluetooth"],
                },
            )
            Stay.objects.update_or_create(
                host=host,
                title="Ikoyi Waterfront Apartment",
                defaults={
                    "description": "Two-bedroom serviced apartment with lagoon views.",
                    "location": "Ikoyi, Lagos",
                    "state": "Lagos",
                    "price_per_night": Decimal("65000.00"),
                    "max_guests": 4,
                    "bedrooms": 2,
                    "bathrooms": 2,
                    "features": ["wifi", "pool", "24h power"],
                },
            )
            service, _ = Service.objects.update_or_create(
                host=host,
                title="Airport Pickup",
                defaults={
                    "description": "Meet-and-greet pickup from MMIA.",
                    "location": "Ikeja, Lagos",
                    "state": "Lagos",
                    "category": "transport",
                    "price": Decimal("15000.00"),
                },
            )
            experience, _ = Experience.objects.update_or_create(
                host=host,
                title="Lagos Island Day Tour",
                defaults={
                    "description": "Guided drive through Lagos Island landmarks.",
                    "location": "Lagos Island",
                    "state": "Lagos",
                    "price_per_person": Decimal("25000.00"),
                    "duration_hours": 6,
                    "car": car,
                },
            )
            experience.services.set([service])

        self.stdout.write(self.style.SUCCESS("Seed data ready."))
        self.stdout.write(f"Host login: {host.email} / {SEED_PASSWORD}")
        self.stdout.write(f"Renter login: {renter.email} / {SEED_PASSWORD}")
        self.stdout.write(f"Admin login: {SUPERUSER_EMAIL} / {SUPERUSER_PASSWORD}")

    def _ensure_user(self, *, email: str, **profile) -> User:
        user, created = User.objects.get_or_create(
            email=email,
            defaults={"username": email, "email_verified": True, **profile},
        )
        if created:
            user.set_password(SEED_PASSWORD)
            user.save(update_fields=["password"])
        else:
            for field, value in profile.items():
                setattr(user, field, value)
            user.save()
        return user

    def _ensure_superuser(self):
        if User.objects.filter(email=SUPERUSER_EMAIL).exists():
            return
        User.objects.create_superuser(
            username=SUPERUSER_EMAIL,
            email=SUPERUSER_EMAIL,
            password=SUPERUSER_PASSWORD,
            display_name="Carrrs Admin",
        )
