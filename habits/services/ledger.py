"""
Completion ledger: one row per (habit, owner, day).

The unique constraint on HabitCompletion is the only thing that serializes
concurrent completions of the same habit on the same day.
"""
import logging
from datetime import date
from typing import Iterable, Optional

from django.db import IntegrityError, transaction
from django.db.models import Count

from habits.models import HabitCompletion

logger = logging.getLogger(__name__)


def _by_key(habit_id, owner_id, day: date):
    return HabitCompletion.objects.filter(habit_id=habit_id, owner_id=owner_id, day=day)


def record_completion(habit_id, owner_id, day: date) -> bool:
    """
    Insert a completion row.

    Returns True when the row was created and False when the key already
    existed. The insert runs in its own savepoint so a losing concurrent
    insert leaves the caller's transaction usable.
    """
    try:
        with transaction.atomic():
            HabitCompletion.objects.create(habit_id=habit_id, owner_id=owner_id, day=day)
    except IntegrityError:
        # Only a duplicate key means "already exists"; anything else is real.
        if not completion_exists(habit_id, owner_id, day):
            raise
        logger.debug("Completion already recorded habit=%s owner=%s day=%s", habit_id, owner_id, day)
        return False
    return True


def remove_completion(habit_id, owner_id, day: date) -> bool:
    deleted, _ = _by_key(habit_id, owner_id, day).delete()
    return deleted > 0


def completion_exists(habit_id, owner_id, day: date) -> bool:
    return _by_key(habit_id, owner_id, day).exists()


def remove_all_for_habit(habit_id) -> int:
    deleted, _ = HabitCompletion.objects.filter(habit_id=habit_id).delete()
    return deleted


def count_by_habit(habit_ids: Optional[Iterable] = None) -> dict:
    """Number of ledger rows per habit id."""
    qs = HabitCompletion.objects.all()
    if habit_ids is not None:
        qs = qs.filter(habit_id__in=list(habit_ids))
    rows = qs.order_by().values("habit_id").annotate(n=Count("id"))
    return {row["habit_id"]: row["n"] for row in rows}
