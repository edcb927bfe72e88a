"""Availability domain models.

The workshop calendar is driven by one global settings row (closed days of
the week and the daily service cap) and by admin-defined excluded dates.
"""

from __future__ import annotations

from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from .domain.engine import AvailabilityRules, DayExclusionRule
from shared.domain.value_objects import DateSpan


class AvailabilitySettings(models.Model):
    """Singleton row with the workshop-wide booking rules."""

    SINGLETON_PK = 1

    exclude_weekends = models.BooleanField(default=True)
    exclude_sundays = models.BooleanField(
        default=False,
        help_text=_("Only applies while weekends are not excluded."),
    )
    max_services_per_day = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1)],
        help_text=_("Maximum active bookings per day. Empty means unlimited."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Availability settings")
        verbose_name_plural = _("Availability settings")
        constraints = [
            models.CheckConstraint(
                condition=~models.Q(exclude_weekends=True, exclude_sundays=True),
                name="availability_settings_single_day_rule",
            ),
        ]

    def __str__(self) -> str:
        return f"Availability settings ({self.day_exclusion_rule.value})"

    @classmethod
    def load(cls) -> "AvailabilitySettings":
        settings, _ = cls.objects.get_or_create(pk=cls.SINGLETON_PK)
        return settings

    @property
    def day_exclusion_rule(self) -> DayExclusionRule:
        return DayExclusionRule.from_flags(self.exclude_weekends, self.exclude_sundays)

    def set_day_exclusion_rule(self, rule: DayExclusionRule) -> None:
        flags = rule.as_flags()
        self.exclude_weekends = flags["exclude_weekends"]
        self.exclude_sundays = flags["exclude_sundays"]

    def as_rules(self) -> AvailabilityRules:
        return AvailabilityRules(
            day_rule=self.day_exclusion_rule,
            max_services_per_day=self.max_services_per_day,
        )


class ExcludedDate(models.Model):
    """A closed day, or an inclusive range of closed days."""

    start_date = models.DateField()
    end_date = models.DateField(
        null=True,
        blank=True,
        help_text=_("Leave empty to close a single day."),
    )
    reason = models.CharField(max_length=255, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Excluded date")
        verbose_name_plural = _("Excluded dates")
        ordering = ["start_date"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__isnull=True) | models.Q(end_date__gte=models.F("start_date")),
                name="excluded_date_valid_range",
            ),
        ]
        indexes = [
            models.Index(fields=["start_date", "end_date"], name="excluded_date_range_idx"),
        ]

    def __str__(self) -> str:
        return str(self.span)

    @property
    def effective_end_date(self):
        return self.end_date or self.start_date

    @property
    def span(self) -> DateSpan:
        return DateSpan.from_bounds(self.start_date, self.end_date)
