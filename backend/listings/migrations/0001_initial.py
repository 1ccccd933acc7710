from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


def _listing_fields(related_name):
    return [
        (
            "id",
            models.BigAutoField(
                auto_created=True,
                primary_key=True,
                serialize=False,
                verbose_name="ID",
            ),
        ),
        ("title", models.CharField(max_length=200)),
        ("description", models.TextField(blank=True)),
        ("location", models.CharField(max_length=200)),
        ("state", models.CharField(blank=True, max_length=100)),
        ("images", models.JSONField(blank=True, default=list)),
        ("features", models.JSONField(blank=True, default=list)),
        ("is_available", models.BooleanField(default=True)),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
        (
            "host",
            models.ForeignKey(
                on_delete=django.db.models.deletion.CASCADE,
                related_name=related_name,
                to=settings.AUTH_USER_MODEL,
            ),
        ),
    ]


LISTING_OPTIONS = {
    "ordering": ["-created_at", "-id"],
    "abstract": False,
}


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Car",
            fields=_listing_fields("cars")
            + [
                ("make", models.CharField(blank=True, max_length=80)),
                ("model", models.CharField(blank=True, max_length=80)),
                ("year", models.PositiveIntegerField(blank=True, null=True)),
                (
                    "seats",
                    models.PositiveIntegerField(
                        default=4,
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                (
                    "transmission",
                    models.CharField(
                        choices=[("automatic", "Automatic"), ("manual", "Manual")],
                        default="automatic",
                        max_length=12,
                    ),
                ),
                ("price_per_day", models.DecimalField(decimal_places=2, max_digits=12)),
            ],
            options=dict(LISTING_OPTIONS),
        ),
        migrations.CreateModel(
            name="Service",
            fields=_listing_fields("services")
            + [
                ("category", models.CharField(blank=True, max_length=80)),
                ("price", models.DecimalField(decimal_places=2, max_digits=12)),
            ],
            options=dict(LISTING_OPTIONS),
        ),
        migrations.CreateModel(
            name="Stay",
            fields=_listing_fields("stays")
            + [
                ("price_per_night", models.DecimalField(decimal_places=2, max_digits=12)),
                (
                    "max_guests",
                    models.PositiveIntegerField(
                        default=1,
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                ("bedrooms", models.PositiveIntegerField(default=1)),
                ("bathrooms", models.PositiveIntegerField(default=1)),
            ],
            options=dict(LISTING_OPTIONS),
        ),
        migrations.CreateModel(
            name="Experience",
            fields=_listing_fields("experiences")
            + [
                ("price_per_person", models.DecimalField(decimal_places=2, max_digits=12)),
                ("duration_hours", models.PositiveIntegerField(blank=True, null=True)),
                (
                    "car",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="experiences",
                        to="listings.car",
                    ),
                ),
                (
                    "services",
                    models.ManyToManyField(
                        blank=True,
                        related_name="experiences",
                        to="listings.service",
                    ),
                ),
            ],
            options=dict(LISTING_OPTIONS),
        ),
    ]
