"""
Habit service: orchestrates the completion ledger and the habit store.

Counter consistency rules:
- complete: a new ledger row bumps both counters by one; an existing row
  for that day leaves them alone. Every call reports completed_today=True.
- uncomplete: a removed ledger row lowers both counters by one (clamped at 0);
  nothing to remove leaves them alone. Every call reports completed_today=False.

streak is a cumulative adjustment counter, not a consecutive-day run.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from django.db import DatabaseError, transaction
from django.db.models import Exists, OuterRef

from habits.exceptions import HabitNotFound
from habits.models import Habit, HabitCompletion
from habits.services import day_keys, habit_store, ledger, tag_index
from habits.services.tag_index import TagUsage

logger = logging.getLogger(__name__)

Instant = Optional[Union[datetime, date]]


@dataclass(frozen=True)
class CompletionStatus:
    completion_count: int
    streak: int
    completed_today: bool


@dataclass(frozen=True)
class HabitView:
    id: int
    name: str
    icon: str
    color: str
    tags: list
    completion_count: int
    streak: int
    completed_today: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def compose(cls, habit: Habit, completed_today: bool) -> "HabitView":
        return cls(
            id=habit.pk,
            name=habit.name,
            icon=habit.icon,
            color=habit.color,
            tags=habit.tag_names(),
            completion_count=habit.completion_count,
            streak=habit.streak,
            completed_today=bool(completed_today),
            created_at=habit.created_at,
            updated_at=habit.updated_at,
        )


def _load(owner_id, habit_id) -> Habit:
    habit = habit_store.get_habit(owner_id, habit_id)
    if habit is None:
        raise HabitNotFound(habit_id)
    return habit


def complete(owner_id, habit_id, on: Instant = None) -> CompletionStatus:
    habit = _load(owner_id, habit_id)
    day = day_keys.day_key(on)

    with transaction.atomic():
        if ledger.record_completion(habit.pk, owner_id, day):
            counters = habit_store.adjust_counters(owner_id, habit.pk, +1, +1)
        else:
            logger.info("Habit %s already completed for %s", habit.pk, day)
            counters = habit_store.get_counters(owner_id, habit.pk)

        if counters is None:
            # Deleted between the load and the write.
            raise HabitNotFound(habit_id)

    return CompletionStatus(counters.completion_count, counters.streak, completed_today=True)


def uncomplete(owner_id, habit_id, on: Instant = None) -> CompletionStatus:
    habit = _load(owner_id, habit_id)
    day = day_keys.day_key(on)

    with transaction.atomic():
        if ledger.remove_completion(habit.pk, owner_id, day):
            counters = habit_store.adjust_counters(owner_id, habit.pk, -1, -1)
        else:
            logger.info("Habit %s has no completion for %s, nothing to undo", habit.pk, day)
            counters = habit_store.get_counters(owner_id, habit.pk)

        if counters is None:
            raise HabitNotFound(habit_id)

    return CompletionStatus(counters.completion_count, counters.streak, completed_today=False)


def get_with_today_status(owner_id, habit_id) -> Optional[HabitView]:
    habit = habit_store.get_habit(owner_id, habit_id)
    if habit is None:
        return None
    today = day_keys.day_key()
    return HabitView.compose(habit, ledger.completion_exists(habit.pk, owner_id, today))


def list_with_today_status(owner_id, tag: Optional[str] = None) -> list[HabitView]:
    """
    All of the owner's habits (optionally one tag) with completed_today.

    "Today" is computed once for the whole listing; each habit gets its own
    existence check as a correlated subquery.
    """
    today = day_keys.day_key()
    done_today = HabitCompletion.objects.filter(habit_id=OuterRef("pk"), owner_id=owner_id, day=today)
    qs = habit_store.list_habits(owner_id, tag).annotate(completed_today_anno=Exists(done_today))
    return [HabitView.compose(h, h.completed_today_anno) for h in qs]


def create_habit(owner_id, fields: dict) -> HabitView:
    habit = habit_store.create_habit(owner_id, fields)
    # A brand new habit has no completions yet.
    return HabitView.compose(habit_store.get_habit(owner_id, habit.pk), False)


def update_habit(owner_id, habit_id, fields: dict) -> HabitView:
    habit = habit_store.update_habit(owner_id, habit_id, fields)
    if habit is None:
        raise HabitNotFound(habit_id)
    today = day_keys.day_key()
    return HabitView.compose(habit, ledger.completion_exists(habit.pk, owner_id, today))


def delete_habit(owner_id, habit_id) -> int:
    """
    Delete a habit, then its completions.

    The ledger is only touched once the habit is gone. A failure while
    clearing completions is logged; orphaned rows are inert and are removed
    by reconcile.purge_orphan_completions.
    """
    habit = habit_store.delete_habit(owner_id, habit_id)
    if habit is None:
        raise HabitNotFound(habit_id)

    try:
        with transaction.atomic():
            removed = ledger.remove_all_for_habit(habit.pk)
    except DatabaseError:
        logger.exception("Failed to remove completions of deleted habit %s", habit.pk)
    else:
        logger.info("Deleted habit %s and %d completion(s)", habit.pk, removed)
    return habit.pk


def tag_usage(owner_id) -> list[TagUsage]:
    return tag_index.tag_usage(owner_id)
