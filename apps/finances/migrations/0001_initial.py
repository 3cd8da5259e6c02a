from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("bookings", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="CommissionRateConfig",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "rate",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=5,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0")),
                            django.core.validators.MaxValueValidator(Decimal("100")),
                        ],
                    ),
                ),
                ("version", models.PositiveIntegerField(default=1)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "updated_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Commission rate",
                "verbose_name_plural": "Commission rate",
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("rate__gte", 0), ("rate__lte", 100)),
                        name="commission_rate_range",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="CommissionRateChange",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("old_rate", models.DecimalField(decimal_places=2, max_digits=5)),
                ("new_rate", models.DecimalField(decimal_places=2, max_digits=5)),
                ("version", models.PositiveIntegerField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "changed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="commission_rate_changes",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Commission rate change",
                "verbose_name_plural": "Commission rate changes",
                "ordering": ["-created_at", "-version"],
            },
        ),
        migrations.CreateModel(
            name="CommissionRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("booking_amount", models.DecimalField(decimal_places=2, editable=False, max_digits=14)),
                ("commission_rate", models.DecimalField(decimal_places=2, editable=False, max_digits=5)),
                ("rate_version", models.PositiveIntegerField(editable=False)),
                ("commission_amount", models.DecimalField(decimal_places=2, editable=False, max_digits=14)),
                ("host_amount", models.DecimalField(decimal_places=2, editable=False, max_digits=14)),
                ("currency", models.CharField(editable=False, max_length=3)),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending payout"), ("paid", "Paid out"), ("cancelled", "Cancelled")],
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("paid_at", models.DateTimeField(blank=True, null=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "booking",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="commission_record",
                        to="bookings.booking",
                    ),
                ),
            ],
            options={
                "verbose_name": "Commission record",
                "verbose_name_plural": "Commission records",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status", "created_at"], name="commission_status_idx"),
                ],
            },
        ),
    ]
