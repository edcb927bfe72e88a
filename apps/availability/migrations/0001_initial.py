import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="AvailabilitySettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("exclude_weekends", models.BooleanField(default=True)),
                (
                    "exclude_sundays",
                    models.BooleanField(
                        default=False,
                        help_text="Only applies while weekends are not excluded.",
                    ),
                ),
                (
                    "max_services_per_day",
                    models.PositiveSmallIntegerField(
                        blank=True,
                        help_text="Maximum active bookings per day. Empty means unlimited.",
                        null=True,
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Availability settings",
                "verbose_name_plural": "Availability settings",
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("exclude_weekends", True), ("exclude_sundays", True), _negated=True),
                        name="availability_settings_single_day_rule",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ExcludedDate",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("start_date", models.DateField()),
                (
                    "end_date",
                    models.DateField(blank=True, help_text="Leave empty to close a single day.", null=True),
                ),
                ("reason", models.CharField(blank=True, max_length=255, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name": "Excluded date",
                "verbose_name_plural": "Excluded dates",
                "ordering": ["start_date"],
                "indexes": [
                    models.Index(fields=["start_date", "end_date"], name="excluded_date_range_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("end_date__isnull", True), ("end_date__gte", models.F("start_date")), _connector="OR"),
                        name="excluded_date_valid_range",
                    ),
                ],
            },
        ),
    ]
