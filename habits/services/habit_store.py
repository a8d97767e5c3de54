import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from django.db import transaction
from django.db.models import F, Value
from django.db.models.functions import Greatest
from django.utils import timezone

from habits.models import Habit, HabitTag

logger = logging.getLogger(__name__)

# Fields a caller may set through create/update. owner, id and the two
# counters are protected and silently dropped.
WRITABLE_FIELDS = ("name", "icon", "color", "tags")


@dataclass(frozen=True)
class HabitCounters:
    completion_count: int
    streak: int


def clean_tags(tags: Iterable[str]) -> list[str]:
    """Trim, drop empties and duplicates; first occurrence keeps its place."""
    seen = []
    for tag in tags or ():
        tag = str(tag).strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


def _writable(fields: dict) -> dict:
    dropped = set(fields) - set(WRITABLE_FIELDS)
    if dropped:
        logger.debug("Ignoring non-writable habit fields: %s", sorted(dropped))
    return {k: v for k, v in fields.items() if k in WRITABLE_FIELDS}


def _set_tags(habit: Habit, tags) -> None:
    habit.tags.all().delete()
    HabitTag.objects.bulk_create(
        [HabitTag(habit=habit, name=name, position=i) for i, name in enumerate(clean_tags(tags))]
    )


def _owned(owner_id):
    return Habit.objects.filter(owner_id=owner_id)


@transaction.atomic
def create_habit(owner_id, fields: dict) -> Habit:
    fields = _writable(fields)
    tags = fields.pop("tags", None)
    habit = Habit.objects.create(owner_id=owner_id, **fields)
    if tags:
        _set_tags(habit, tags)
    return habit


def get_habit(owner_id, habit_id) -> Optional[Habit]:
    return _owned(owner_id).prefetch_related("tags").filter(pk=habit_id).first()


@transaction.atomic
def update_habit(owner_id, habit_id, fields: dict) -> Optional[Habit]:
    habit = _owned(owner_id).filter(pk=habit_id).first()
    if habit is None:
        return None

    fields = _writable(fields)
    tags = fields.pop("tags", None)
    for key, value in fields.items():
        setattr(habit, key, value)

    # Only the touched columns are written, so counters moved concurrently
    # by adjust_counters are never overwritten with a stale value.
    habit.save(update_fields=[*fields.keys(), "updated_at"])
    if tags is not None:
        _set_tags(habit, tags)

    return get_habit(owner_id, habit_id)


@transaction.atomic
def delete_habit(owner_id, habit_id) -> Optional[Habit]:
    habit = _owned(owner_id).select_for_update().filter(pk=habit_id).first()
    if habit is None:
        return None
    habit.delete()
    # delete() clears the pk; hand it back for the caller's cascade.
    habit.pk = habit_id
    return habit


def list_habits(owner_id, tag: Optional[str] = None):
    qs = _owned(owner_id)
    if tag:
        qs = qs.filter(tags__name=tag)
    return qs.prefetch_related("tags")


def get_counters(owner_id, habit_id) -> Optional[HabitCounters]:
    row = _owned(owner_id).filter(pk=habit_id).values_list("completion_count", "streak").first()
    if row is None:
        return None
    return HabitCounters(completion_count=row[0], streak=row[1])


def adjust_counters(owner_id, habit_id, completion_delta: int, streak_delta: int) -> Optional[HabitCounters]:
    """
    Apply signed deltas to both counters in a single UPDATE, clamping at 0.

    Returns the counters as stored afterwards, or None if the habit is gone.
    """
    updated = _owned(owner_id).filter(pk=habit_id).update(
        completion_count=Greatest(F("completion_count") + Value(completion_delta), Value(0)),
        streak=Greatest(F("streak") + Value(streak_delta), Value(0)),
        updated_at=timezone.now(),
    )
    if not updated:
        return None
    logger.debug(
        "Adjusted counters habit=%s completion_delta=%+d streak_delta=%+d",
        habit_id, completion_delta, streak_delta,
    )
    return get_counters(owner_id, habit_id)
