import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("customers", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "reference_number",
                    models.CharField(blank=True, editable=False, max_length=20, null=True, unique=True),
                ),
                (
                    "service_type",
                    models.CharField(
                        choices=[
                            ("basic_service", "Basic service"),
                            ("full_service", "Full service"),
                            ("strip_and_rebuild", "Strip and rebuild"),
                            ("bosch_diagnostics", "Bosch diagnostics"),
                        ],
                        max_length=32,
                    ),
                ),
                ("date", models.DateField(help_text="Calendar day the bike is booked in.")),
                ("bike_details", models.TextField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("ready", "Ready for collection"),
                            ("complete", "Complete"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="pending",
                        max_length=16,
                    ),
                ),
                ("notes", models.TextField(blank=True, null=True)),
                ("ready_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bookings",
                        to="customers.customer",
                    ),
                ),
            ],
            options={
                "verbose_name": "Booking",
                "verbose_name_plural": "Bookings",
                "ordering": ["date", "created_at"],
                "indexes": [
                    models.Index(fields=["date", "status"], name="booking_date_status_idx"),
                    models.Index(fields=["status"], name="booking_status_idx"),
                ],
            },
        ),
    ]
