from __future__ import annotations
from typing import TYPE_CHECKING

from django.conf import settings
from django.db import models


class Habit(models.Model):
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='habits',
    )
    name = models.CharField(max_length=100)
    icon = models.CharField(max_length=100, default='default-habit-icon')
    color = models.CharField(max_length=32, default='#4a69bd')

    # Maintained by the completion ledger; never written by a plain update.
    completion_count = models.PositiveIntegerField(default=0)
    streak = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['created_at', 'id']

    if TYPE_CHECKING:
        # Django dynamically injects these via related_name
        tags = None
        completions = None

    def tag_names(self) -> list[str]:
        return [t.name for t in self.tags.all()]

    def __str__(self) -> str:
        return self.name


class HabitTag(models.Model):
    habit = models.ForeignKey(Habit, on_delete=models.CASCADE,
                              related_name='tags')
    name = models.CharField(max_length=64)
    position = models.PositiveSmallIntegerField(default=0)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['habit', 'name'], name='unique_tag_per_habit')
        ]
        ordering = ['position', 'id']

    def __str__(self) -> str:
        return self.name


class HabitCompletion(models.Model):
    # Plain reference: the habit service owns the cascade on habit deletion.
    habit = models.ForeignKey(Habit, on_delete=models.DO_NOTHING,
                              db_constraint=False, related_name='completions')
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='habit_completions',
    )
    day = models.DateField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['habit', 'owner', 'day'],
                                    name='unique_completion_per_habit_owner_day')
        ]
        indexes = [
            models.Index(fields=['owner', 'day'], name='completion_owner_day_idx'),
        ]
        ordering = ['-day', '-created_at']

    def __str__(self) -> str:
        return f"{self.habit_id} @ {self.day}"
